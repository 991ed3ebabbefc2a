"""
Bit-set sparse vector.

SparseBitVector records only which indices are present. Every present
entry reads back as 1.0, storing 0.0 is a no-op and storing any other value
sets the bit, so magnitudes are lost on write. Arithmetic results are
bit vectors too and therefore just as lossy: subtract, for example, marks
every index where the exact difference is non-zero.

The bitset is a Python int (bit i set <=> index i present); the int is
immutable, so non-zero iteration walks a snapshot and cannot be disturbed
by concurrent set() calls.
"""

from __future__ import annotations

from numbers import Real
from typing import Callable, Iterator
import operator

import numpy as np
from numpy.typing import ArrayLike

from pylinear.core.capabilities import (
    CAPABILITY_SPARSE,
    CAPABILITY_ORDERED,
    CAPABILITY_MUTABLE,
    CAPABILITY_LOSSY,
)
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_non_negative,
)
from pylinear.vector import AbstractDoubleVector


class SparseBitVector(AbstractDoubleVector):
    """
    Presence-only sparse vector.
    
    Usage:
        v = SparseBitVector.from_array([1, 2, 3, 0, 5])
        v.to_array()    # [1., 1., 1., 0., 1.]
        v.set(3, 0.0)   # no-op
    """
    
    _capabilities = frozenset({
        CAPABILITY_SPARSE,
        CAPABILITY_ORDERED,
        CAPABILITY_MUTABLE,
        CAPABILITY_LOSSY,
    })
    
    def __init__(self, dimension: int):
        check_non_negative(dimension, 'dimension')
        self._dimension = dimension
        self._bits = 0
    
    @classmethod
    def from_array(cls, values: ArrayLike) -> SparseBitVector:
        array = check_array(values, 'values')
        check_ndim(array, 1, 'values')
        vector = cls(len(array))
        for index in np.flatnonzero(array).tolist():
            vector._bits |= 1 << index
        return vector
    
    @classmethod
    def from_vector(cls, other: DoubleVector) -> SparseBitVector:
        vector = cls(other.dimension)
        if isinstance(other, SparseBitVector):
            vector._bits = other._bits
        else:
            for index, _ in other.iterate_non_zero():
                vector._bits |= 1 << index
        return vector
    
    @property
    def dimension(self) -> int:
        return self._dimension
    
    @property
    def length(self) -> int:
        return self._bits.bit_count()
    
    def get(self, index: int) -> float:
        index = check_index(index, self._dimension)
        return 1.0 if (self._bits >> index) & 1 else 0.0
    
    def _put(self, index: int, value: float) -> None:
        if value != 0.0:
            self._bits |= 1 << index
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        """Present indices in ascending order, each with value 1.0."""
        bits = self._bits
        while bits:
            lowest = bits & -bits
            yield VectorEntry(lowest.bit_length() - 1, 1.0)
            bits ^= lowest
    
    def _new(self, dimension: int) -> SparseBitVector:
        return SparseBitVector(dimension)
    
    def deep_copy(self) -> SparseBitVector:
        return SparseBitVector.from_vector(self)
    
    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    
    def add(self, other: DoubleVector | float) -> SparseBitVector:
        if isinstance(other, Real):
            return super().add(other)
        return self._combine_union(other, operator.add, 'add')
    
    def subtract(self, other: DoubleVector | float) -> SparseBitVector:
        if isinstance(other, Real):
            return super().subtract(other)
        return self._combine_union(other, operator.sub, 'subtract')
    
    def _combine_union(
        self,
        other: DoubleVector,
        combine: Callable[[float, float], float],
        operation: str,
    ) -> SparseBitVector:
        # indices whose exact result is zero must come out clear
        self._check_operand(other, operation)
        union = {index for index, _ in self.iterate_non_zero()}
        union.update(index for index, _ in other.iterate_non_zero())
        result = SparseBitVector(self._dimension)
        for index in sorted(union):
            result._put(index, combine(self.get(index), other.get(index)))
        return result
    
    def sum(self) -> float:
        return float(self.length)
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseBitVector):
            return NotImplemented
        return self._dimension == other._dimension and self._bits == other._bits
    
    def __hash__(self) -> int:
        return hash((self._dimension, self._bits))
