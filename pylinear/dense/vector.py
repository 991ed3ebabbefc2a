"""
Dense vector backed by a float64 numpy array.

Every element is stored, so length == dimension, and element-wise
operations evaluate at every index (log(0) yields -inf, 0/0 yields nan).
Operations between two dense vectors are single numpy expressions; a
sparse operand is densified with to_array().
"""

from __future__ import annotations

from numbers import Real
from typing import Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.capabilities import CAPABILITY_ORDERED, CAPABILITY_MUTABLE
from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_non_negative,
    check_slice_bounds,
)
from pylinear.vector import AbstractDoubleVector


class DenseDoubleVector(AbstractDoubleVector):
    """
    Dense float64 vector.
    
    Usage:
        v = DenseDoubleVector.from_array([1.0, 2.0, 3.0])
        DenseDoubleVector.ones(4)
        DenseDoubleVector.fill(4, 0.5)
    """
    
    _capabilities = frozenset({CAPABILITY_ORDERED, CAPABILITY_MUTABLE})
    
    def __init__(self, dimension: int):
        check_non_negative(dimension, 'dimension')
        self._values = np.zeros(dimension, dtype=np.float64)
    
    @classmethod
    def _wrap(cls, values: NDArray[np.float64]) -> DenseDoubleVector:
        # takes ownership of values without copying
        vector = cls(0)
        vector._values = values
        return vector
    
    @classmethod
    def from_array(cls, values: ArrayLike) -> DenseDoubleVector:
        array = check_array(values, 'values')
        check_ndim(array, 1, 'values')
        return cls._wrap(array)
    
    @classmethod
    def from_vector(cls, other: DoubleVector) -> DenseDoubleVector:
        return cls._wrap(np.array(other.to_array(), dtype=np.float64))
    
    @classmethod
    def fill(cls, dimension: int, value: float) -> DenseDoubleVector:
        check_non_negative(dimension, 'dimension')
        return cls._wrap(np.full(dimension, float(value), dtype=np.float64))
    
    @classmethod
    def ones(cls, dimension: int) -> DenseDoubleVector:
        return cls.fill(dimension, 1.0)
    
    @classmethod
    def zeros(cls, dimension: int) -> DenseDoubleVector:
        return cls(dimension)
    
    # ------------------------------------------------------------------
    # Representation hooks
    # ------------------------------------------------------------------
    
    @property
    def dimension(self) -> int:
        return len(self._values)
    
    @property
    def length(self) -> int:
        return len(self._values)
    
    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only view of the backing array."""
        view = self._values.view()
        view.flags.writeable = False
        return view
    
    def get(self, index: int) -> float:
        check_index(index, len(self._values))
        return float(self._values[index])
    
    def _put(self, index: int, value: float) -> None:
        self._values[index] = value
    
    def iterate(self) -> Iterator[VectorEntry]:
        for index, value in enumerate(self._values.tolist()):
            yield VectorEntry(index, value)
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        for index in np.flatnonzero(self._values).tolist():
            yield VectorEntry(index, float(self._values[index]))
    
    def _new(self, dimension: int) -> DenseDoubleVector:
        return DenseDoubleVector(dimension)
    
    def deep_copy(self) -> DenseDoubleVector:
        return DenseDoubleVector._wrap(self._values.copy())
    
    def to_array(self) -> NDArray[np.float64]:
        return self._values.copy()
    
    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    
    def _operand(self, other: DoubleVector | float, operation: str) -> NDArray[np.float64] | float:
        if isinstance(other, Real):
            return float(other)
        self._check_operand(other, operation)
        if isinstance(other, DenseDoubleVector):
            return other._values
        return other.to_array()
    
    def _compute(self, func) -> DenseDoubleVector:
        with np.errstate(all='ignore'):
            return DenseDoubleVector._wrap(np.asarray(func(), dtype=np.float64))
    
    def dot(self, other: DoubleVector) -> float:
        if isinstance(other, DenseDoubleVector):
            self._check_operand(other, 'dot')
            return float(np.dot(self._values, other._values))
        return super().dot(other)
    
    def add(self, other: DoubleVector | float) -> DenseDoubleVector:
        right = self._operand(other, 'add')
        return self._compute(lambda: self._values + right)
    
    def subtract(self, other: DoubleVector | float) -> DenseDoubleVector:
        right = self._operand(other, 'subtract')
        return self._compute(lambda: self._values - right)
    
    def subtract_from(self, scalar: float) -> DenseDoubleVector:
        return self._compute(lambda: float(scalar) - self._values)
    
    def multiply(self, other: DoubleVector | float) -> DenseDoubleVector:
        right = self._operand(other, 'multiply')
        return self._compute(lambda: self._values * right)
    
    def divide(self, other: DoubleVector | float) -> DenseDoubleVector:
        right = self._operand(other, 'divide')
        return self._compute(lambda: self._values / right)
    
    def divide_from(self, other: DoubleVector | float) -> DenseDoubleVector:
        left = self._operand(other, 'divide_from')
        return self._compute(lambda: left / self._values)
    
    def pow(self, x: float) -> DenseDoubleVector:
        if x == 2.0:
            return self._compute(lambda: self._values * self._values)
        return self._compute(lambda: np.power(self._values, x))
    
    def sqrt(self) -> DenseDoubleVector:
        return self._compute(lambda: np.sqrt(self._values))
    
    def log(self) -> DenseDoubleVector:
        return self._compute(lambda: np.log(self._values))
    
    def exp(self) -> DenseDoubleVector:
        return self._compute(lambda: np.exp(self._values))
    
    def abs(self) -> DenseDoubleVector:
        return self._compute(lambda: np.abs(self._values))
    
    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    
    def _require_elements(self, operation: str) -> None:
        if len(self._values) == 0:
            raise ValidationError(f"{operation}: vector has dimension 0")
    
    def sum(self) -> float:
        return float(np.sum(self._values))
    
    def max(self) -> float:
        self._require_elements('max')
        return float(np.max(self._values))
    
    def min(self) -> float:
        self._require_elements('min')
        return float(np.min(self._values))
    
    def max_index(self) -> int:
        self._require_elements('max_index')
        return int(np.argmax(self._values))
    
    def min_index(self) -> int:
        self._require_elements('min_index')
        return int(np.argmin(self._values))
    
    def slice(self, start: int, end: int | None = None) -> DenseDoubleVector:
        if end is None:
            start, end = 0, start
        check_slice_bounds(start, end, len(self._values))
        return DenseDoubleVector._wrap(self._values[start:end].copy())
    
    # ------------------------------------------------------------------
    # Structural equality
    # ------------------------------------------------------------------
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseDoubleVector):
            return NotImplemented
        return np.array_equal(self._values, other._values)
    
    def __hash__(self) -> int:
        return hash(tuple(self._values.tolist()))
    
    def __repr__(self) -> str:
        if len(self._values) < 50:
            return f"DenseDoubleVector({self._values.tolist()})"
        return f"DenseDoubleVector({len(self._values)}x1)"
