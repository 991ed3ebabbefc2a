"""
pytest configuration and shared fixtures.
"""

import warnings

import pytest
import numpy as np

from pylinear.core.compute.blas import MultiplyPolicy, set_default_policy
from pylinear.dense.vector import DenseDoubleVector
from pylinear.sparse.bit import SparseBitVector
from pylinear.sparse.hashed import SparseDoubleVector
from pylinear.sparse.sequential import SequentialSparseDoubleVector


# Value-preserving representations; SparseBitVector is lossy on general data
EXACT_VECTOR_TYPES = [
    SequentialSparseDoubleVector,
    SparseDoubleVector,
    DenseDoubleVector,
]

# Every representation; on 0/1 data the bit vector is exact as well
ALL_VECTOR_TYPES = EXACT_VECTOR_TYPES + [SparseBitVector]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture(params=EXACT_VECTOR_TYPES, ids=lambda cls: cls.__name__)
def vector_type(request):
    """Each exact vector representation in turn."""
    return request.param


@pytest.fixture(params=EXACT_VECTOR_TYPES, ids=lambda cls: cls.__name__)
def other_vector_type(request):
    """Second, independent sweep over the exact representations."""
    return request.param


@pytest.fixture(params=ALL_VECTOR_TYPES, ids=lambda cls: cls.__name__)
def any_vector_type(request):
    """Each vector representation in turn, the lossy bit vector included."""
    return request.param


@pytest.fixture(params=ALL_VECTOR_TYPES, ids=lambda cls: cls.__name__)
def other_any_vector_type(request):
    """Second, independent sweep over every representation."""
    return request.param


@pytest.fixture
def binary_array(rng):
    """Length-40 array of 0.0 and 1.0, roughly 30% ones."""
    return (rng.random(40) < 0.3).astype(np.float64)


@pytest.fixture
def sparse_array(rng):
    """Length-40 array with roughly 70% zeros."""
    values = rng.standard_normal(40)
    values[rng.random(40) < 0.7] = 0.0
    return values


@pytest.fixture(autouse=True)
def restore_default_policy():
    """Tests that install a process-wide multiply policy get it undone."""
    previous = set_default_policy(MultiplyPolicy())
    yield
    set_default_policy(previous)


@pytest.fixture
def no_warnings():
    """Turn every warning raised inside the test into an error."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        yield
