"""
Hash-map sparse vector.

SparseDoubleVector stores its non-zeros in a plain dict keyed by index:
O(1) random get/set in any order, no ordering guarantee on non-zero
iteration, no linear merge.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
from numpy.typing import ArrayLike

from pylinear.core.capabilities import CAPABILITY_SPARSE, CAPABILITY_MUTABLE
from pylinear.core.exceptions import ConcurrentModificationError
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_non_negative,
)
from pylinear.vector import AbstractDoubleVector


class SparseDoubleVector(AbstractDoubleVector):
    """
    Sparse vector over a dict[int, float].
    
    Writing 0.0 removes the key, so length always equals the number of
    non-zero entries.
    """
    
    _capabilities = frozenset({CAPABILITY_SPARSE, CAPABILITY_MUTABLE})
    
    def __init__(self, dimension: int, expected_length: int | None = None):
        """
        Create an all-zero vector.
        
        Args:
            dimension: Logical length of the vector
            expected_length: Accepted for signature parity with the other
                sparse vectors; dicts size themselves
        """
        check_non_negative(dimension, 'dimension')
        if expected_length is not None:
            check_non_negative(expected_length, 'expected_length')
        self._dimension = dimension
        self._entries: dict[int, float] = {}
    
    @classmethod
    def from_array(cls, values: ArrayLike) -> SparseDoubleVector:
        array = check_array(values, 'values')
        check_ndim(array, 1, 'values')
        vector = cls(len(array))
        non_zero = np.flatnonzero(array)
        vector._entries = dict(zip(non_zero.tolist(), array[non_zero].tolist()))
        return vector
    
    @classmethod
    def from_vector(cls, other: DoubleVector) -> SparseDoubleVector:
        vector = cls(other.dimension)
        if isinstance(other, SparseDoubleVector):
            vector._entries = dict(other._entries)
        else:
            vector._entries = {index: value for index, value in other.iterate_non_zero()}
        return vector
    
    @property
    def dimension(self) -> int:
        return self._dimension
    
    @property
    def length(self) -> int:
        return len(self._entries)
    
    def get(self, index: int) -> float:
        index = check_index(index, self._dimension)
        return self._entries.get(index, 0.0)
    
    def _put(self, index: int, value: float) -> None:
        if value != 0.0:
            self._entries[index] = value
        else:
            self._entries.pop(index, None)
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        """
        Stored entries in unspecified order.
        
        Raises:
            ConcurrentModificationError: If an entry is added or removed
                while the iterator is being consumed
        """
        try:
            for index, value in self._entries.items():
                yield VectorEntry(index, value)
        except RuntimeError as e:
            raise ConcurrentModificationError(
                "SparseDoubleVector modified during iteration"
            ) from e
    
    def _new(self, dimension: int) -> SparseDoubleVector:
        return SparseDoubleVector(dimension)
    
    def deep_copy(self) -> SparseDoubleVector:
        return SparseDoubleVector.from_vector(self)
    
    def sum(self) -> float:
        return float(sum(self._entries.values()))
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseDoubleVector):
            return NotImplemented
        return self._dimension == other._dimension and self._entries == other._entries
    
    def __hash__(self) -> int:
        return hash((self._dimension, frozenset(self._entries.items())))
