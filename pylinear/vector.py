"""
Shared behaviour of every PyLinear vector representation.

AbstractDoubleVector implements the DoubleVector capability surface once,
in terms of a handful of representation hooks:

    dimension, length       sizes
    get(i), _put(i, v)      checked read, unchecked write
    iterate_non_zero()      stored entries
    _new(dimension)         empty vector of the same representation
    deep_copy()             independent copy

Performance-critical paths (dot, element-wise multiply, add/subtract) use
the sparse-aware policy here and are overridden where a representation has
something better (numpy for dense, linear merge for ordered sparse).
Rarely-hot paths (slice, pow, apply, min/max) are shared as-is.
"""

from __future__ import annotations

from numbers import Real
from typing import Callable, Iterator
import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.capabilities import CAPABILITY_SPARSE
from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_same_dimension,
    check_slice_bounds,
)


class AbstractDoubleVector:
    """
    Base class for dense, sparse and bit vectors.
    
    Arithmetic accepts a scalar or any DoubleVector of the same dimension
    and returns a new vector of this vector's representation. Only set()
    mutates in place.
    """
    
    _capabilities: frozenset[str] = frozenset()
    
    # ------------------------------------------------------------------
    # Representation hooks
    # ------------------------------------------------------------------
    
    @property
    def dimension(self) -> int:
        raise NotImplementedError
    
    @property
    def length(self) -> int:
        raise NotImplementedError
    
    def get(self, index: int) -> float:
        raise NotImplementedError
    
    def _put(self, index: int, value: float) -> None:
        raise NotImplementedError
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        raise NotImplementedError
    
    def _new(self, dimension: int) -> AbstractDoubleVector:
        raise NotImplementedError
    
    def deep_copy(self) -> AbstractDoubleVector:
        raise NotImplementedError

    @classmethod
    def from_array(cls, values: ArrayLike) -> AbstractDoubleVector:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Alternative constructors
    # ------------------------------------------------------------------

    @classmethod
    def with_first(cls, first: float, values: ArrayLike) -> AbstractDoubleVector:
        """Vector [first, values[0], ..., values[n-1]] of dimension n+1."""
        rest = check_array(values, 'values')
        check_ndim(rest, 1, 'values')
        return cls.from_array(np.concatenate(([float(first)], rest)))

    @classmethod
    def with_last(cls, values: ArrayLike, last: float) -> AbstractDoubleVector:
        """Vector [values[0], ..., values[n-1], last] of dimension n+1."""
        rest = check_array(values, 'values')
        check_ndim(rest, 1, 'values')
        return cls.from_array(np.concatenate((rest, [float(last)])))

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------
    
    @property
    def is_sparse(self) -> bool:
        return CAPABILITY_SPARSE in self._capabilities
    
    @property
    def is_named(self) -> bool:
        return False
    
    @property
    def name(self) -> str | None:
        return None
    
    def supports(self, capability: str) -> bool:
        return capability in self._capabilities
    
    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    
    def set(self, index: int, value: float) -> None:
        """
        Store value at index.
        
        Raises:
            ValidationError: If index is not an integer
            IndexOutOfRangeError: If index is outside [0, dimension)
        """
        index = check_index(index, self.dimension)
        self._put(index, float(value))
    
    def __getitem__(self, index: int) -> float:
        return self.get(index)
    
    def __setitem__(self, index: int, value: float) -> None:
        self.set(index, value)
    
    def iterate(self) -> Iterator[VectorEntry]:
        """
        Every logical index from 0 to dimension-1, in order.
        
        Absent entries are reported as 0.0. Each call returns a fresh
        generator.
        """
        for index in range(self.dimension):
            yield VectorEntry(index, self.get(index))
    
    def __iter__(self) -> Iterator[VectorEntry]:
        return self.iterate()
    
    def to_array(self) -> NDArray[np.float64]:
        """Dense float64 copy of the vector."""
        result = np.zeros(self.dimension, dtype=np.float64)
        for index, value in self.iterate_non_zero():
            result[index] = value
        return result
    
    # ------------------------------------------------------------------
    # Binary operations
    # ------------------------------------------------------------------
    
    def _check_operand(self, other: DoubleVector, operation: str) -> None:
        check_same_dimension(self.dimension, other.dimension, operation)
    
    @staticmethod
    def _smaller_first(
        left: DoubleVector,
        right: DoubleVector,
    ) -> tuple[DoubleVector, DoubleVector]:
        # the operand with fewer stored entries drives the loop
        if right.length < left.length:
            return right, left
        return left, right
    
    def dot(self, other: DoubleVector) -> float:
        """
        Inner product.
        
        Only the non-zero entries of the operand with the smaller length
        are visited; the other operand is probed by get().
        """
        self._check_operand(other, 'dot')
        smaller, larger = self._smaller_first(self, other)
        result = 0.0
        for index, value in smaller.iterate_non_zero():
            result += larger.get(index) * value
        return result
    
    def __matmul__(self, other: DoubleVector) -> float:
        return self.dot(other)
    
    def add(self, other: DoubleVector | float) -> AbstractDoubleVector:
        if isinstance(other, Real):
            return self._map_all(lambda value: value + other)
        self._check_operand(other, 'add')
        result = self.deep_copy()
        for index, value in other.iterate_non_zero():
            result._put(index, result.get(index) + value)
        return result
    
    def subtract(self, other: DoubleVector | float) -> AbstractDoubleVector:
        if isinstance(other, Real):
            return self._map_all(lambda value: value - other)
        self._check_operand(other, 'subtract')
        result = self.deep_copy()
        for index, value in other.iterate_non_zero():
            result._put(index, result.get(index) - value)
        return result
    
    def subtract_from(self, scalar: float) -> AbstractDoubleVector:
        """scalar - self, element-wise."""
        return self._map_all(lambda value: scalar - value)
    
    def multiply(self, other: DoubleVector | float) -> AbstractDoubleVector:
        if isinstance(other, Real):
            return self._map_non_zero(lambda value: value * other)
        self._check_operand(other, 'multiply')
        smaller, larger = self._smaller_first(self, other)
        result = self._new(self.dimension)
        for index, value in smaller.iterate_non_zero():
            result._put(index, value * larger.get(index))
        return result
    
    def divide(self, other: DoubleVector | float) -> AbstractDoubleVector:
        """
        self / other, element-wise.
        
        Only stored entries of self are divided: 0/0 at an absent index is
        never evaluated, while a stored value over an absent divisor yields
        inf or nan per IEEE-754.
        """
        if isinstance(other, Real):
            return self._map_non_zero(lambda value: ieee_divide(value, other))
        self._check_operand(other, 'divide')
        result = self._new(self.dimension)
        for index, value in self.iterate_non_zero():
            result._put(index, ieee_divide(value, other.get(index)))
        return result
    
    def divide_from(self, other: DoubleVector | float) -> AbstractDoubleVector:
        """
        other / self, element-wise.
        
        With a scalar only stored entries of self are evaluated; with a
        vector only stored entries of the numerator are.
        """
        if isinstance(other, Real):
            return self._map_non_zero(lambda value: ieee_divide(other, value))
        self._check_operand(other, 'divide_from')
        result = self._new(self.dimension)
        for index, value in other.iterate_non_zero():
            result._put(index, ieee_divide(value, self.get(index)))
        return result
    
    def __add__(self, other: DoubleVector | float) -> AbstractDoubleVector:
        return self.add(other)
    
    def __radd__(self, other: float) -> AbstractDoubleVector:
        return self.add(other)
    
    def __sub__(self, other: DoubleVector | float) -> AbstractDoubleVector:
        return self.subtract(other)
    
    def __rsub__(self, other: float) -> AbstractDoubleVector:
        return self.subtract_from(other)
    
    def __mul__(self, other: DoubleVector | float) -> AbstractDoubleVector:
        return self.multiply(other)
    
    def __rmul__(self, other: float) -> AbstractDoubleVector:
        return self.multiply(other)
    
    def __truediv__(self, other: DoubleVector | float) -> AbstractDoubleVector:
        return self.divide(other)
    
    def __rtruediv__(self, other: float) -> AbstractDoubleVector:
        return self.divide_from(other)
    
    def __neg__(self) -> AbstractDoubleVector:
        return self.multiply(-1.0)
    
    # ------------------------------------------------------------------
    # Unary transforms (stored entries only)
    # ------------------------------------------------------------------
    
    def pow(self, x: float) -> AbstractDoubleVector:
        if x == 2.0:
            return self._map_non_zero(lambda value: value * value)
        return self._map_non_zero(lambda value: ieee_pow(value, x))
    
    def sqrt(self) -> AbstractDoubleVector:
        return self._map_non_zero(lambda value: ieee_call(math.sqrt, value))
    
    def log(self) -> AbstractDoubleVector:
        return self._map_non_zero(lambda value: ieee_call(math.log, value))
    
    def exp(self) -> AbstractDoubleVector:
        return self._map_non_zero(lambda value: ieee_call(math.exp, value))
    
    def abs(self) -> AbstractDoubleVector:
        return self._map_non_zero(abs)
    
    def __abs__(self) -> AbstractDoubleVector:
        return self.abs()
    
    def apply(
        self,
        func: Callable[..., float],
        other: DoubleVector | None = None,
    ) -> AbstractDoubleVector:
        """
        Map every logical index through func into a new vector.
        
        Args:
            func: func(index, value) or, with other, func(index, left, right)
            other: Optional second vector of the same dimension
        """
        result = self._new(self.dimension)
        if other is None:
            for index, value in self.iterate():
                result._put(index, func(index, value))
        else:
            self._check_operand(other, 'apply')
            for index, value in self.iterate():
                result._put(index, func(index, value, other.get(index)))
        return result
    
    def _map_non_zero(self, func: Callable[[float], float]) -> AbstractDoubleVector:
        result = self._new(self.dimension)
        for index, value in self.iterate_non_zero():
            result._put(index, func(value))
        return result
    
    def _map_all(self, func: Callable[[float], float]) -> AbstractDoubleVector:
        result = self._new(self.dimension)
        for index, value in self.iterate():
            result._put(index, func(value))
        return result
    
    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    
    def sum(self) -> float:
        return sum(value for _, value in self.iterate_non_zero())
    
    def _has_implicit_zero(self) -> bool:
        return self.length < self.dimension
    
    def _first_absent_index(self) -> int:
        for index in range(self.dimension):
            if self.get(index) == 0.0:
                return index
        return -1
    
    def _extreme(self, better: Callable[[float, float], bool], operation: str) -> tuple[int, float]:
        if self.dimension == 0:
            raise ValidationError(f"{operation}: vector has dimension 0")
        best_index = -1
        best_value = 0.0
        for index, value in self.iterate_non_zero():
            if best_index < 0 or better(value, best_value) or (
                value == best_value and index < best_index
            ):
                best_index, best_value = index, value
        if self._has_implicit_zero():
            zero_index = self._first_absent_index()
            if best_index < 0 or better(0.0, best_value) or (
                best_value == 0.0 and zero_index < best_index
            ):
                best_index, best_value = zero_index, 0.0
        return best_index, best_value
    
    def max(self) -> float:
        """Largest element, counting absent entries as 0.0."""
        return self._extreme(lambda a, b: a > b, 'max')[1]
    
    def min(self) -> float:
        """Smallest element, counting absent entries as 0.0."""
        return self._extreme(lambda a, b: a < b, 'min')[1]
    
    def max_index(self) -> int:
        """Lowest index holding the largest element."""
        return self._extreme(lambda a, b: a > b, 'max_index')[0]
    
    def min_index(self) -> int:
        """Lowest index holding the smallest element."""
        return self._extreme(lambda a, b: a < b, 'min_index')[0]
    
    # ------------------------------------------------------------------
    # Slicing
    # ------------------------------------------------------------------
    
    def slice(self, start: int, end: int | None = None) -> AbstractDoubleVector:
        """
        Entries [start, end) reindexed to start at 0.
        
        slice(n) is shorthand for slice(0, n).
        """
        if end is None:
            start, end = 0, start
        check_slice_bounds(start, end, self.dimension)
        result = self._new(end - start)
        for index, value in self.iterate_non_zero():
            if start <= index < end:
                result._put(index - start, value)
        return result
    
    def slice_by_length(self, start: int, length: int) -> AbstractDoubleVector:
        """Entries [start, start+length) reindexed to start at 0."""
        return self.slice(start, start + length)
    
    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    
    def _format_entries(self) -> str:
        return ", ".join(f"{index}={value!r}" for index, value in self.iterate_non_zero())
    
    def __repr__(self) -> str:
        if self.length < 50:
            return f"{type(self).__name__}({self.dimension}, [{self._format_entries()}])"
        return f"{type(self).__name__}({self.dimension}x1)"


def ieee_divide(numerator: float, denominator: float) -> float:
    """Division with IEEE-754 results instead of ZeroDivisionError."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(numerator) / np.float64(denominator))


def ieee_pow(base: float, exponent: float) -> float:
    with np.errstate(all='ignore'):
        return float(np.power(np.float64(base), np.float64(exponent)))


def ieee_call(func: Callable[[float], float], value: float) -> float:
    """Apply a math function, mapping domain errors to nan/inf like numpy."""
    try:
        return func(value)
    except ValueError:
        if func is math.log and value == 0.0:
            return -math.inf
        return math.nan
    except OverflowError:
        return math.inf
