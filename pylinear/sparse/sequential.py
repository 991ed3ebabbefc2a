"""
Ordered-array sparse vector.

SequentialSparseDoubleVector keeps its non-zero entries in an
OrderedIntDoubleMapping, so non-zero iteration is in ascending index order,
lookups are binary searches, and addition/subtraction with another
ordered vector runs as a single linear merge.

Best suited to vectors built in increasing index order and combined with
other vectors of the same kind.
"""

from __future__ import annotations

from numbers import Real
from typing import Iterator
import operator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.capabilities import (
    CAPABILITY_SPARSE,
    CAPABILITY_ORDERED,
    CAPABILITY_LINEAR_MERGE,
    CAPABILITY_MUTABLE,
)
from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_non_negative,
    check_slice_bounds,
)
from pylinear.sparse.mapping import OrderedIntDoubleMapping, DEFAULT_CAPACITY, MAX_KEY
from pylinear.vector import AbstractDoubleVector


class SequentialSparseDoubleVector(AbstractDoubleVector):
    """
    Sparse vector over a sorted (index, value) array pair.
    
    Usage:
        v = SequentialSparseDoubleVector.from_array([1, 2, 0, 0, 0, 3])
        v.length        # 3 stored entries
        v.dimension     # 6
        w = v.add(v)    # linear merge
    """
    
    _capabilities = frozenset({
        CAPABILITY_SPARSE,
        CAPABILITY_ORDERED,
        CAPABILITY_LINEAR_MERGE,
        CAPABILITY_MUTABLE,
    })
    
    def __init__(self, dimension: int, expected_length: int | None = None):
        """
        Create an all-zero vector.
        
        Args:
            dimension: Logical length of the vector
            expected_length: Capacity hint for the number of non-zeros
            
        Raises:
            ValidationError: If dimension is negative or its indices do not
                fit the int32 key storage
        """
        check_non_negative(dimension, 'dimension')
        if dimension > MAX_KEY + 1:
            raise ValidationError(
                f"dimension: {dimension} exceeds the int32 key range, "
                f"at most {MAX_KEY + 1} is supported"
            )
        if expected_length is None:
            expected_length = min(dimension, DEFAULT_CAPACITY)
        check_non_negative(expected_length, 'expected_length')
        self._dimension = dimension
        self._mapping = OrderedIntDoubleMapping(expected_length)
    
    @classmethod
    def from_array(cls, values: ArrayLike) -> SequentialSparseDoubleVector:
        """Build from a dense 1-D sequence, storing only its non-zeros."""
        array = check_array(values, 'values')
        check_ndim(array, 1, 'values')
        non_zero = np.flatnonzero(array)
        vector = cls(len(array), expected_length=len(non_zero))
        mapping = vector._mapping
        # ascending keys, every set() takes the append path
        for index in non_zero.tolist():
            mapping.set(index, float(array[index]))
        return vector
    
    @classmethod
    def from_vector(cls, other: DoubleVector) -> SequentialSparseDoubleVector:
        """
        Copy any vector into ordered sparse form.
        
        An ordered source has its raw mapping state copied; any other source
        is inserted entry by entry from its non-zero iterator.
        """
        if isinstance(other, SequentialSparseDoubleVector):
            vector = cls(other.dimension, expected_length=0)
            vector._mapping.copy_internal_state(other._mapping)
            return vector
        vector = cls(other.dimension, expected_length=other.length)
        for index, value in other.iterate_non_zero():
            vector._mapping.set(index, value)
        return vector
    
    # ------------------------------------------------------------------
    # Representation hooks
    # ------------------------------------------------------------------
    
    @property
    def dimension(self) -> int:
        return self._dimension
    
    @property
    def length(self) -> int:
        return self._mapping.count
    
    @property
    def mapping(self) -> OrderedIntDoubleMapping:
        """The backing mapping (shared, not a copy)."""
        return self._mapping
    
    def get(self, index: int) -> float:
        index = check_index(index, self._dimension)
        return self._mapping.get(index)
    
    def _put(self, index: int, value: float) -> None:
        self._mapping.set(index, value)
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        """
        Stored entries in ascending index order.
        
        Raises:
            ConcurrentModificationError: If the vector gains or loses an
                entry while the iterator is being consumed
        """
        return self._mapping.items()
    
    def _new(self, dimension: int) -> SequentialSparseDoubleVector:
        return SequentialSparseDoubleVector(dimension)
    
    def deep_copy(self) -> SequentialSparseDoubleVector:
        return SequentialSparseDoubleVector.from_vector(self)
    
    def to_array(self) -> NDArray[np.float64]:
        result = np.zeros(self._dimension, dtype=np.float64)
        result[self._mapping.indices] = self._mapping.values
        return result
    
    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    
    def add(self, other: DoubleVector | float) -> SequentialSparseDoubleVector:
        if isinstance(other, Real):
            return super().add(other)
        self._check_operand(other, 'add')
        result = self.deep_copy()
        if isinstance(other, SequentialSparseDoubleVector):
            result._mapping.merge(other._mapping, operator.add)
        else:
            for index, value in other.iterate_non_zero():
                result._mapping.increment(index, value)
        return result
    
    def subtract(self, other: DoubleVector | float) -> SequentialSparseDoubleVector:
        if isinstance(other, Real):
            return super().subtract(other)
        self._check_operand(other, 'subtract')
        result = self.deep_copy()
        if isinstance(other, SequentialSparseDoubleVector):
            result._mapping.merge(other._mapping, operator.sub)
        else:
            for index, value in other.iterate_non_zero():
                result._mapping.increment(index, -value)
        return result
    
    def multiply(self, other: DoubleVector | float) -> SequentialSparseDoubleVector:
        if isinstance(other, Real):
            return self._transformed(lambda values: values * other)
        return super().multiply(other)
    
    def divide(self, other: DoubleVector | float) -> SequentialSparseDoubleVector:
        if isinstance(other, Real):
            return self._transformed(lambda values: values / np.float64(other))
        return super().divide(other)
    
    def pow(self, x: float) -> SequentialSparseDoubleVector:
        if x == 2.0:
            return self._transformed(lambda values: values * values)
        return self._transformed(lambda values: np.power(values, x))
    
    def sqrt(self) -> SequentialSparseDoubleVector:
        return self._transformed(np.sqrt)
    
    def log(self) -> SequentialSparseDoubleVector:
        return self._transformed(np.log)
    
    def exp(self) -> SequentialSparseDoubleVector:
        return self._transformed(np.exp)
    
    def abs(self) -> SequentialSparseDoubleVector:
        return self._transformed(np.abs)
    
    def _transformed(self, func) -> SequentialSparseDoubleVector:
        result = self.deep_copy()
        result._mapping.transform(func)
        return result
    
    def sum(self) -> float:
        return float(np.sum(self._mapping.values))
    
    # ------------------------------------------------------------------
    # Slicing
    # ------------------------------------------------------------------
    
    def slice(self, start: int, end: int | None = None) -> SequentialSparseDoubleVector:
        if end is None:
            start, end = 0, start
        check_slice_bounds(start, end, self._dimension)
        indices = self._mapping.indices
        low = int(np.searchsorted(indices, start, side='left'))
        high = int(np.searchsorted(indices, end, side='left'))
        result = SequentialSparseDoubleVector(end - start, expected_length=high - low)
        result._mapping = OrderedIntDoubleMapping._from_arrays(
            (indices[low:high] - start).astype(np.int32),
            self._mapping.values[low:high].copy(),
            high - low,
        )
        return result
    
    def _first_absent_index(self) -> int:
        # keys are sorted, so the first gap is where indices[i] != i
        indices = self._mapping.indices
        gaps = np.flatnonzero(indices != np.arange(len(indices)))
        return int(gaps[0]) if len(gaps) else len(indices)
    
    # ------------------------------------------------------------------
    # Structural equality
    # ------------------------------------------------------------------
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequentialSparseDoubleVector):
            return NotImplemented
        return self._dimension == other._dimension and self._mapping == other._mapping
    
    def __hash__(self) -> int:
        return hash((self._dimension, self._mapping))
