"""
Tests for NamedDoubleVector delegation.
"""

import numpy as np
import pytest

from pylinear.core.capabilities import CAPABILITY_NAMED, CAPABILITY_SPARSE
from pylinear.core.exceptions import IndexOutOfRangeError, ValidationError
from pylinear.core.protocols import DoubleVector
from pylinear.dense.vector import DenseDoubleVector
from pylinear.named import NamedDoubleVector
from pylinear.sparse.sequential import SequentialSparseDoubleVector


@pytest.fixture
def named():
    return NamedDoubleVector('weights', SequentialSparseDoubleVector.from_array([1.0, 0.0, 3.0]))


class TestConstruction:

    def test_name_and_flags(self, named):
        assert named.name == 'weights'
        assert named.is_named
        assert named.is_sparse
        assert isinstance(named, DoubleVector)

    def test_rejects_non_string_name(self):
        with pytest.raises(ValidationError, match="name"):
            NamedDoubleVector(7, DenseDoubleVector(3))

    def test_rejects_non_vector(self):
        with pytest.raises(ValidationError, match="vector"):
            NamedDoubleVector('x', [1.0, 2.0])

    def test_no_array_constructors(self):
        with pytest.raises(ValidationError, match=r"NamedDoubleVector\(name, vector\)"):
            NamedDoubleVector.from_array([1.0, 2.0])
        with pytest.raises(ValidationError):
            NamedDoubleVector.with_first(0.0, [1.0])
        with pytest.raises(ValidationError):
            NamedDoubleVector.with_last([1.0], 0.0)

    def test_capabilities(self, named):
        assert named.supports(CAPABILITY_NAMED)
        assert named.supports(CAPABILITY_SPARSE)
        assert not named.supports('no-such-capability')


class TestDelegation:

    def test_reads_and_writes_through(self, named):
        named.set(1, 2.0)
        assert named.vector.get(1) == 2.0
        assert named[1] == 2.0
        assert named.dimension == 3
        assert named.length == 3

    def test_out_of_range_from_delegate(self, named):
        with pytest.raises(IndexOutOfRangeError):
            named.get(3)

    def test_results_are_unnamed(self, named):
        result = named.add(1.0)
        assert isinstance(result, SequentialSparseDoubleVector)
        assert not result.is_named
        np.testing.assert_array_equal(result.to_array(), [2.0, 1.0, 4.0])

    def test_operators_delegate(self, named):
        np.testing.assert_array_equal((named * 2).to_array(), [2.0, 0.0, 6.0])
        np.testing.assert_array_equal((named - named).to_array(), [0.0, 0.0, 0.0])

    def test_reductions(self, named):
        assert named.sum() == 4.0
        assert named.max() == 3.0
        assert named.min_index() == 1
        assert named.dot(DenseDoubleVector.ones(3)) == 4.0

    def test_slice(self, named):
        np.testing.assert_array_equal(named.slice(1, 3).to_array(), [0.0, 3.0])

    def test_iteration(self, named):
        assert [value for _, value in named] == [1.0, 0.0, 3.0]
        assert dict(named.iterate_non_zero()) == {0: 1.0, 2: 3.0}


class TestCopyAndEquality:

    def test_deep_copy_keeps_name(self, named):
        copy = named.deep_copy()
        assert copy.name == 'weights'
        assert copy == named
        copy.set(0, 5.0)
        assert named.get(0) == 1.0

    def test_name_matters(self, named):
        other = NamedDoubleVector('bias', named.vector.deep_copy())
        assert other != named

    def test_repr(self):
        v = NamedDoubleVector('w', DenseDoubleVector.from_array([1.0, 2.0]))
        assert repr(v) == "w: DenseDoubleVector([1.0, 2.0])"
