"""
Behaviour every exact vector representation must share.

Each test runs once per representation (and, for binary operations, once
per pair of representations) via the vector_type / other_vector_type
fixtures in conftest.py:
    - representation equivalence: same dense result for the same inputs
    - dot symmetry across representations
    - deep copy identity and independence
    - slice boundaries
    - max/min with implicit zeros
    - IEEE division asymmetry for sparse storage
"""

import math
import operator

import numpy as np
import pytest

from pylinear.core.exceptions import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    ValidationError,
)
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.sparse.bit import SparseBitVector


A = [1.0, 2.0, 0.0, 0.0, 0.0, 3.0, 4.0, 5.0]
B = [0.0, -2.0, 7.0, 0.0, 1.5, 0.0, 4.0, 0.5]


# ═══════════════════════════════════════════════════════════════════════
# Contract
# ═══════════════════════════════════════════════════════════════════════


class TestContract:

    def test_satisfies_protocol(self, vector_type):
        assert isinstance(vector_type.from_array(A), DoubleVector)

    def test_get_set(self, vector_type):
        v = vector_type.from_array(A)
        v.set(2, 9.0)
        v[3] = -1.0
        assert v.get(2) == 9.0
        assert v[3] == -1.0

    @pytest.mark.parametrize("index", [-1, 8, 100])
    def test_out_of_range(self, vector_type, index):
        v = vector_type.from_array(A)
        with pytest.raises(IndexOutOfRangeError):
            v.get(index)
        with pytest.raises(IndexOutOfRangeError):
            v.set(index, 1.0)

    @pytest.mark.parametrize("index", [1.5, 1.0, "1"])
    def test_non_integer_index_rejected(self, any_vector_type, index):
        v = any_vector_type.from_array([0.0, 1.0, 0.0, 1.0])
        with pytest.raises(ValidationError, match="expected an integer"):
            v.set(index, 1.0)
        with pytest.raises(ValidationError, match="expected an integer"):
            v.get(index)
        assert v.length == (2 if v.is_sparse else 4)
        np.testing.assert_array_equal(v.to_array(), [0.0, 1.0, 0.0, 1.0])

    def test_numpy_integer_index(self, any_vector_type):
        v = any_vector_type(4)
        v.set(np.int64(2), 1.0)
        assert v.get(np.int32(2)) == 1.0
        assert [index for index, _ in v.iterate_non_zero()] == [2]
        assert type(next(v.iterate_non_zero()).index) is int

    def test_full_iteration(self, vector_type):
        v = vector_type.from_array(A)
        assert list(v.iterate()) == [VectorEntry(i, value) for i, value in enumerate(A)]
        assert [value for _, value in v] == A

    def test_iterate_is_fresh_per_call(self, vector_type):
        v = vector_type.from_array(A)
        first = v.iterate()
        next(first)
        assert next(v.iterate()) == (0, 1.0)

    def test_non_zero_iteration(self, vector_type):
        v = vector_type.from_array(A)
        assert dict(v.iterate_non_zero()) == {0: 1.0, 1: 2.0, 5: 3.0, 6: 4.0, 7: 5.0}

    def test_sparse_length(self, vector_type):
        v = vector_type.from_array(A)
        assert v.length == (5 if v.is_sparse else 8)

    def test_not_named(self, vector_type):
        v = vector_type.from_array(A)
        assert not v.is_named
        assert v.name is None


# ═══════════════════════════════════════════════════════════════════════
# Representation equivalence
# ═══════════════════════════════════════════════════════════════════════


BINARY_OPS = [
    ('add', operator.add),
    ('subtract', operator.sub),
    ('multiply', operator.mul),
]


class TestEquivalence:

    @pytest.mark.parametrize("name,op", BINARY_OPS, ids=[name for name, _ in BINARY_OPS])
    def test_binary_vector_ops(self, vector_type, other_vector_type, name, op):
        left = vector_type.from_array(A)
        right = other_vector_type.from_array(B)
        result = getattr(left, name)(right)
        assert type(result) is vector_type
        np.testing.assert_array_equal(result.to_array(), op(np.array(A), np.array(B)))

    @pytest.mark.parametrize("name,op", BINARY_OPS, ids=[name for name, _ in BINARY_OPS])
    def test_scalar_ops(self, vector_type, name, op):
        result = getattr(vector_type.from_array(A), name)(2.5)
        np.testing.assert_array_equal(result.to_array(), op(np.array(A), 2.5))

    def test_operators(self, vector_type, other_vector_type):
        left = vector_type.from_array(A)
        right = other_vector_type.from_array(B)
        np.testing.assert_array_equal((left + right).to_array(), np.add(A, B))
        np.testing.assert_array_equal((left - right).to_array(), np.subtract(A, B))
        np.testing.assert_array_equal((left * 2).to_array(), np.multiply(A, 2))
        np.testing.assert_array_equal((2 * left).to_array(), np.multiply(A, 2))
        np.testing.assert_array_equal((left / 2).to_array(), np.divide(A, 2))
        np.testing.assert_array_equal((-left).to_array(), np.negative(A))
        np.testing.assert_array_equal((1 - left).to_array(), np.subtract(1, A))

    def test_random_equivalence(self, vector_type, other_vector_type, sparse_array, rng):
        other = sparse_array[rng.permutation(len(sparse_array))]
        left = vector_type.from_array(sparse_array)
        right = other_vector_type.from_array(other)
        np.testing.assert_allclose(left.add(right).to_array(), sparse_array + other)
        np.testing.assert_allclose(left.multiply(right).to_array(), sparse_array * other)
        assert left.dot(right) == pytest.approx(float(sparse_array @ other))

    def test_unary_on_stored_entries(self, vector_type):
        positive = [4.0, 0.0, 9.0, 0.0, 1.0]
        v = vector_type.from_array(positive)
        np.testing.assert_allclose(v.sqrt().to_array(), np.sqrt(positive))
        np.testing.assert_allclose(v.pow(2.0).to_array(), np.square(positive))
        np.testing.assert_allclose(v.pow(3.0).to_array(), np.power(positive, 3.0))
        np.testing.assert_allclose(
            vector_type.from_array([-1.0, 0.0, 2.0]).abs().to_array(), [1.0, 0.0, 2.0]
        )

    def test_subtract_from_scalar(self, vector_type):
        result = vector_type.from_array(A).subtract_from(1.0)
        np.testing.assert_array_equal(result.to_array(), np.subtract(1.0, A))

    def test_divide_vector(self, vector_type, other_vector_type):
        numerator = vector_type.from_array([2.0, 6.0, 9.0])
        denominator = other_vector_type.from_array([1.0, 3.0, 3.0])
        np.testing.assert_array_equal(numerator.divide(denominator).to_array(), [2.0, 2.0, 3.0])
        np.testing.assert_array_equal(denominator.divide_from(numerator).to_array(), [2.0, 2.0, 3.0])

    def test_sum(self, vector_type):
        assert vector_type.from_array(A).sum() == sum(A)

    def test_apply(self, vector_type, other_vector_type):
        left = vector_type.from_array(A)
        right = other_vector_type.from_array(B)
        indexed = left.apply(lambda index, value: value + index)
        np.testing.assert_array_equal(indexed.to_array(), np.add(A, np.arange(8)))
        combined = left.apply(lambda index, x, y: x * 10 + y, right)
        np.testing.assert_array_equal(combined.to_array(), np.multiply(A, 10) + np.array(B))

    def test_with_first_last(self, vector_type):
        np.testing.assert_array_equal(vector_type.with_first(7.0, [0.0, 1.0]).to_array(), [7, 0, 1])
        np.testing.assert_array_equal(vector_type.with_last([0.0, 1.0], 7.0).to_array(), [0, 1, 7])


class TestDimensionMismatch:

    @pytest.mark.parametrize("name", ['add', 'subtract', 'multiply', 'divide', 'dot', 'divide_from'])
    def test_raises_before_writing(self, vector_type, other_vector_type, name):
        left = vector_type.from_array(A)
        right = other_vector_type.from_array([1.0, 2.0])
        with pytest.raises(DimensionMismatchError) as info:
            getattr(left, name)(right)
        assert info.value.expected == 8
        assert info.value.actual == 2
        np.testing.assert_array_equal(left.to_array(), A)


# ═══════════════════════════════════════════════════════════════════════
# Dot symmetry
# ═══════════════════════════════════════════════════════════════════════


class TestDot:

    def test_symmetry(self, vector_type, other_vector_type, sparse_array, rng):
        other = rng.standard_normal(len(sparse_array))
        left = vector_type.from_array(sparse_array)
        right = other_vector_type.from_array(other)
        assert left.dot(right) == pytest.approx(right.dot(left))
        assert left.dot(right) == pytest.approx(float(sparse_array @ other))

    def test_matmul_operator(self, vector_type):
        v = vector_type.from_array(A)
        assert v @ v == pytest.approx(float(np.dot(A, A)))

    def test_with_bit_vector(self, vector_type):
        v = vector_type.from_array(A)
        bits = SparseBitVector.from_array(B)
        # bit vector reads every present entry as 1.0
        expected = float(np.dot(A, np.array(B) != 0))
        assert v.dot(bits) == expected
        assert bits.dot(v) == expected


# ═══════════════════════════════════════════════════════════════════════
# Deep copy
# ═══════════════════════════════════════════════════════════════════════


class TestDeepCopy:

    def test_equal_and_independent(self, vector_type):
        original = vector_type.from_array(A)
        copy = original.deep_copy()
        assert copy == original
        assert hash(copy) == hash(original)
        copy.set(0, 42.0)
        copy.set(2, 1.0)
        assert original.get(0) == 1.0
        assert original.get(2) == 0.0
        assert copy != original

    def test_results_do_not_alias_operands(self, vector_type):
        original = vector_type.from_array(A)
        result = original.multiply(1.0)
        result.set(0, 0.0)
        assert original.get(0) == 1.0


# ═══════════════════════════════════════════════════════════════════════
# Slicing
# ═══════════════════════════════════════════════════════════════════════


class TestSlice:

    def test_prefix(self, vector_type):
        sliced = vector_type.from_array(A).slice(4)
        assert sliced.dimension == 4
        np.testing.assert_array_equal(sliced.to_array(), [1, 2, 0, 0])

    def test_range(self, vector_type):
        sliced = vector_type.from_array(A).slice(4, 8)
        assert sliced.dimension == 4
        np.testing.assert_array_equal(sliced.to_array(), [0, 3, 4, 5])

    @pytest.mark.parametrize("start,end", [(0, 0), (8, 8), (0, 8), (7, 8)])
    def test_boundaries(self, vector_type, start, end):
        sliced = vector_type.from_array(A).slice(start, end)
        assert sliced.dimension == end - start
        np.testing.assert_array_equal(sliced.to_array(), A[start:end])

    def test_by_length(self, vector_type):
        sliced = vector_type.from_array(A).slice_by_length(5, 2)
        np.testing.assert_array_equal(sliced.to_array(), [3, 4])

    @pytest.mark.parametrize("start,end", [(-1, 2), (0, 9), (5, 4)])
    def test_invalid(self, vector_type, start, end):
        with pytest.raises(IndexOutOfRangeError):
            vector_type.from_array(A).slice(start, end)


# ═══════════════════════════════════════════════════════════════════════
# Extremes
# ═══════════════════════════════════════════════════════════════════════


class TestExtremes:

    def test_max_min(self, vector_type):
        v = vector_type.from_array(A)
        assert v.max() == 5.0
        assert v.max_index() == 7
        assert v.min() == 0.0
        assert v.min_index() == 2

    def test_implicit_zero_is_max(self, vector_type):
        v = vector_type.from_array([-3.0, 0.0, -1.0, 0.0])
        assert v.max() == 0.0
        assert v.max_index() == 1
        assert v.min() == -3.0
        assert v.min_index() == 0

    def test_ties_take_lowest_index(self, vector_type):
        v = vector_type.from_array([1.0, 5.0, 2.0, 5.0])
        assert v.max_index() == 1

    def test_empty_vector_rejected(self, vector_type):
        v = vector_type.from_array([])
        with pytest.raises(ValidationError):
            v.max()
        with pytest.raises(ValidationError):
            v.min_index()


# ═══════════════════════════════════════════════════════════════════════
# IEEE division
# ═══════════════════════════════════════════════════════════════════════


class TestIeeeDivision:

    def test_scalar_zero(self, vector_type, no_warnings):
        result = vector_type.from_array([1.0, -1.0, 0.0]).divide(0.0)
        assert result.get(0) == math.inf
        assert result.get(1) == -math.inf
        if vector_type.from_array([0.0]).is_sparse:
            # 0/0 at a non-stored index is never evaluated
            assert result.get(2) == 0.0
        else:
            assert math.isnan(result.get(2))

    def test_vector_zero_denominator(self, vector_type, no_warnings):
        numerator = vector_type.from_array([1.0, 0.0])
        denominator = vector_type.from_array([0.0, 0.0])
        result = numerator.divide(denominator)
        assert result.get(0) == math.inf
        if numerator.is_sparse:
            assert result.get(1) == 0.0
        else:
            assert math.isnan(result.get(1))

    def test_divide_from_scalar(self, vector_type, no_warnings):
        result = vector_type.from_array([2.0, 0.0]).divide_from(1.0)
        assert result.get(0) == 0.5
        if result.is_sparse:
            assert result.get(1) == 0.0
        else:
            assert result.get(1) == math.inf


# ═══════════════════════════════════════════════════════════════════════
# 0/1 data, bit vector included
# ═══════════════════════════════════════════════════════════════════════


class TestBinaryData:

    def test_same_dense_result(self, any_vector_type, binary_array):
        v = any_vector_type.from_array(binary_array)
        np.testing.assert_array_equal(v.to_array(), binary_array)
        assert v.sum() == binary_array.sum()
        assert dict(v.iterate_non_zero()) == {
            int(i): 1.0 for i in np.flatnonzero(binary_array)
        }

    def test_dot_and_multiply(self, any_vector_type, other_any_vector_type, binary_array, rng):
        other = binary_array[rng.permutation(len(binary_array))]
        left = any_vector_type.from_array(binary_array)
        right = other_any_vector_type.from_array(other)
        assert left.dot(right) == float(binary_array @ other)
        assert right.dot(left) == float(binary_array @ other)
        product = left.multiply(right)
        assert type(product) is any_vector_type
        np.testing.assert_array_equal(product.to_array(), binary_array * other)

    @pytest.mark.parametrize("start,end", [(0, 0), (0, 40), (39, 40), (40, 40), (7, 23)])
    def test_slice_boundaries(self, any_vector_type, binary_array, start, end):
        sliced = any_vector_type.from_array(binary_array).slice(start, end)
        assert type(sliced) is any_vector_type
        assert sliced.dimension == end - start
        np.testing.assert_array_equal(sliced.to_array(), binary_array[start:end])

    def test_slice_invalid(self, any_vector_type, binary_array):
        with pytest.raises(IndexOutOfRangeError):
            any_vector_type.from_array(binary_array).slice(10, 41)

    def test_deep_copy_equal_and_independent(self, any_vector_type, binary_array):
        original = any_vector_type.from_array(binary_array)
        copy = original.deep_copy()
        assert type(copy) is any_vector_type
        assert copy == original
        assert hash(copy) == hash(original)
        absent = int(np.flatnonzero(binary_array == 0.0)[0])
        copy.set(absent, 1.0)
        assert original.get(absent) == 0.0
        assert copy != original
        np.testing.assert_array_equal(original.to_array(), binary_array)

    def test_deep_copy_of_copy(self, any_vector_type, binary_array):
        original = any_vector_type.from_array(binary_array)
        assert original.deep_copy().deep_copy() == original
