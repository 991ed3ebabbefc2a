"""
Immutable vector of dimension one.
"""

from __future__ import annotations

from numbers import Real
from typing import Callable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.exceptions import ImmutableOperationError, ValidationError
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.core.validation import (
    check_array,
    check_index,
    check_same_dimension,
    check_slice_bounds,
)
from pylinear.dense.vector import DenseDoubleVector
from pylinear.vector import AbstractDoubleVector


class SingleEntryDoubleVector(AbstractDoubleVector):
    """
    A single float wrapped as a one-element vector.
    
    set() raises ImmutableOperationError; every operation evaluates on the
    one element (zero included) and returns a new SingleEntryDoubleVector.
    """
    
    _capabilities = frozenset()
    
    def __init__(self, value: float):
        self._value = float(value)
    
    @classmethod
    def from_array(cls, values: ArrayLike) -> SingleEntryDoubleVector:
        """
        Build from exactly one value.
        
        with_first(value, []) and with_last([], value) therefore work, while
        any longer input raises ValidationError.
        """
        array = check_array(values, 'values')
        if array.shape != (1,):
            raise ValidationError(
                f"values: expected exactly one element, got shape {array.shape}"
            )
        return cls(array[0])
    
    @property
    def value(self) -> float:
        return self._value
    
    @property
    def dimension(self) -> int:
        return 1
    
    @property
    def length(self) -> int:
        return 1
    
    def get(self, index: int) -> float:
        check_index(index, 1)
        return self._value
    
    def set(self, index: int, value: float) -> None:
        raise ImmutableOperationError(
            "SingleEntryDoubleVector is immutable", operation='set'
        )
    
    def _put(self, index: int, value: float) -> None:
        raise ImmutableOperationError(
            "SingleEntryDoubleVector is immutable", operation='set'
        )
    
    def iterate(self) -> Iterator[VectorEntry]:
        yield VectorEntry(0, self._value)
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        if self._value != 0.0:
            yield VectorEntry(0, self._value)
    
    def deep_copy(self) -> SingleEntryDoubleVector:
        return SingleEntryDoubleVector(self._value)
    
    def to_array(self) -> NDArray[np.float64]:
        return np.array([self._value], dtype=np.float64)
    
    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    
    def _other_value(self, other: DoubleVector | float, operation: str) -> np.float64:
        if isinstance(other, Real):
            return np.float64(other)
        check_same_dimension(1, other.dimension, operation)
        return np.float64(other.get(0))
    
    def _evaluate(self, func: Callable[[np.float64], np.float64]) -> SingleEntryDoubleVector:
        with np.errstate(all='ignore'):
            return SingleEntryDoubleVector(func(np.float64(self._value)))
    
    def add(self, other: DoubleVector | float) -> SingleEntryDoubleVector:
        right = self._other_value(other, 'add')
        return self._evaluate(lambda v: v + right)
    
    def subtract(self, other: DoubleVector | float) -> SingleEntryDoubleVector:
        right = self._other_value(other, 'subtract')
        return self._evaluate(lambda v: v - right)
    
    def subtract_from(self, scalar: float) -> SingleEntryDoubleVector:
        return self._evaluate(lambda v: np.float64(scalar) - v)
    
    def multiply(self, other: DoubleVector | float) -> SingleEntryDoubleVector:
        right = self._other_value(other, 'multiply')
        return self._evaluate(lambda v: v * right)
    
    def divide(self, other: DoubleVector | float) -> SingleEntryDoubleVector:
        right = self._other_value(other, 'divide')
        return self._evaluate(lambda v: v / right)
    
    def divide_from(self, other: DoubleVector | float) -> SingleEntryDoubleVector:
        left = self._other_value(other, 'divide_from')
        return self._evaluate(lambda v: left / v)
    
    def dot(self, other: DoubleVector) -> float:
        return float(self._value * self._other_value(other, 'dot'))
    
    def pow(self, x: float) -> SingleEntryDoubleVector:
        if x == 2.0:
            return self._evaluate(lambda v: v * v)
        return self._evaluate(lambda v: np.power(v, x))
    
    def sqrt(self) -> SingleEntryDoubleVector:
        return self._evaluate(np.sqrt)
    
    def log(self) -> SingleEntryDoubleVector:
        return self._evaluate(np.log)
    
    def exp(self) -> SingleEntryDoubleVector:
        return self._evaluate(np.exp)
    
    def abs(self) -> SingleEntryDoubleVector:
        return self._evaluate(np.abs)
    
    def apply(
        self,
        func: Callable[..., float],
        other: DoubleVector | None = None,
    ) -> SingleEntryDoubleVector:
        if other is None:
            return SingleEntryDoubleVector(func(0, self._value))
        return SingleEntryDoubleVector(func(0, self._value, self._other_value(other, 'apply')))
    
    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    
    def sum(self) -> float:
        return self._value
    
    def max(self) -> float:
        return self._value
    
    def min(self) -> float:
        return self._value
    
    def max_index(self) -> int:
        return 0
    
    def min_index(self) -> int:
        return 0
    
    def slice(self, start: int, end: int | None = None) -> AbstractDoubleVector:
        """
        Copy for the full range [0, 1).
        
        An empty range yields an empty DenseDoubleVector, since a single
        entry vector always has dimension 1.
        """
        if end is None:
            start, end = 0, start
        check_slice_bounds(start, end, 1)
        if end - start == 1:
            return self.deep_copy()
        return DenseDoubleVector(0)
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SingleEntryDoubleVector):
            return NotImplemented
        return self._value == other._value
    
    def __hash__(self) -> int:
        return hash(self._value)
    
    def __repr__(self) -> str:
        return f"SingleEntryDoubleVector({self._value!r})"
