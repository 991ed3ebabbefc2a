"""
Named vector wrapper.

NamedDoubleVector attaches a human readable name to any DoubleVector and
forwards every operation to it. Arithmetic results are the delegate's
results and carry no name; deep_copy keeps the name.
"""

from __future__ import annotations

from typing import Callable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.capabilities import CAPABILITY_NAMED
from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import DoubleVector, VectorEntry
from pylinear.vector import AbstractDoubleVector


class NamedDoubleVector(AbstractDoubleVector):
    """
    A name plus a delegate vector.
    
    Usage:
        v = NamedDoubleVector('weights', DenseDoubleVector.ones(3))
        v.name          # 'weights'
        v.add(1.0)      # DenseDoubleVector, unnamed
    """
    
    def __init__(self, name: str, vector: DoubleVector):
        if not isinstance(name, str):
            raise ValidationError(f"name: expected str, got {type(name).__name__}")
        if not isinstance(vector, DoubleVector):
            raise ValidationError(
                f"vector: expected a DoubleVector, got {type(vector).__name__}"
            )
        self._name = name
        self._vector = vector
    
    @classmethod
    def from_array(cls, values: ArrayLike) -> NamedDoubleVector:
        """
        Not supported: a name cannot be derived from values.
        
        Wrap a vector built by a concrete representation instead, e.g.
        NamedDoubleVector(name, DenseDoubleVector.from_array(values)).
        with_first and with_last go through here and fail the same way.
        
        Raises:
            ValidationError: Always
        """
        raise ValidationError(
            "NamedDoubleVector has no array constructor, use "
            "NamedDoubleVector(name, vector) around a concrete vector"
        )
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def is_named(self) -> bool:
        return True
    
    @property
    def vector(self) -> DoubleVector:
        """The wrapped vector (shared, not a copy)."""
        return self._vector
    
    @property
    def is_sparse(self) -> bool:
        return self._vector.is_sparse
    
    def supports(self, capability: str) -> bool:
        return capability == CAPABILITY_NAMED or self._vector.supports(capability)
    
    # ------------------------------------------------------------------
    # Delegation
    # ------------------------------------------------------------------
    
    @property
    def dimension(self) -> int:
        return self._vector.dimension
    
    @property
    def length(self) -> int:
        return self._vector.length
    
    def get(self, index: int) -> float:
        return self._vector.get(index)
    
    def set(self, index: int, value: float) -> None:
        self._vector.set(index, value)
    
    def _put(self, index: int, value: float) -> None:
        self._vector.set(index, value)
    
    def iterate(self) -> Iterator[VectorEntry]:
        return self._vector.iterate()
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        return self._vector.iterate_non_zero()
    
    def to_array(self) -> NDArray[np.float64]:
        return self._vector.to_array()
    
    def deep_copy(self) -> NamedDoubleVector:
        return NamedDoubleVector(self._name, self._vector.deep_copy())
    
    def add(self, other: DoubleVector | float) -> DoubleVector:
        return self._vector.add(other)
    
    def subtract(self, other: DoubleVector | float) -> DoubleVector:
        return self._vector.subtract(other)
    
    def subtract_from(self, scalar: float) -> DoubleVector:
        return self._vector.subtract_from(scalar)
    
    def multiply(self, other: DoubleVector | float) -> DoubleVector:
        return self._vector.multiply(other)
    
    def divide(self, other: DoubleVector | float) -> DoubleVector:
        return self._vector.divide(other)
    
    def divide_from(self, other: DoubleVector | float) -> DoubleVector:
        return self._vector.divide_from(other)
    
    def dot(self, other: DoubleVector) -> float:
        return self._vector.dot(other)
    
    def pow(self, x: float) -> DoubleVector:
        return self._vector.pow(x)
    
    def sqrt(self) -> DoubleVector:
        return self._vector.sqrt()
    
    def log(self) -> DoubleVector:
        return self._vector.log()
    
    def exp(self) -> DoubleVector:
        return self._vector.exp()
    
    def abs(self) -> DoubleVector:
        return self._vector.abs()
    
    def apply(
        self,
        func: Callable[..., float],
        other: DoubleVector | None = None,
    ) -> DoubleVector:
        return self._vector.apply(func, other)
    
    def sum(self) -> float:
        return self._vector.sum()
    
    def max(self) -> float:
        return self._vector.max()
    
    def min(self) -> float:
        return self._vector.min()
    
    def max_index(self) -> int:
        return self._vector.max_index()
    
    def min_index(self) -> int:
        return self._vector.min_index()
    
    def slice(self, start: int, end: int | None = None) -> DoubleVector:
        return self._vector.slice(start, end)
    
    def slice_by_length(self, start: int, length: int) -> DoubleVector:
        return self._vector.slice_by_length(start, length)
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedDoubleVector):
            return NotImplemented
        return self._name == other._name and self._vector == other._vector
    
    def __hash__(self) -> int:
        return hash((self._name, self._vector))
    
    def __repr__(self) -> str:
        return f"{self._name}: {self._vector!r}"
