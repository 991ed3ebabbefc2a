"""
Core protocols for PyLinear.

These define the structural capability contract every vector and matrix
representation satisfies. We use Protocol (structural typing) rather than
ABC (nominal typing) so external collaborators (e.g. a user's own dense
wrapper) interoperate without inheriting from PyLinear classes.

Design Principles:
    - Minimal contracts: get/set/iterate/dimension plus the algebra
    - Capability-driven: use supports() for optional features
    - Every arithmetic operation returns a new instance
"""

from __future__ import annotations

from typing import Protocol, Iterator, NamedTuple, Callable, runtime_checkable

import numpy as np
from numpy.typing import NDArray


class VectorEntry(NamedTuple):
    """A single (index, value) pair produced by vector iteration."""
    index: int
    value: float


@runtime_checkable
class DoubleVector(Protocol):
    """
    Capability surface shared by dense, sparse, bit and named vectors.
    
    Arithmetic methods accept either a scalar or another DoubleVector and
    always return a new vector; only set() mutates.
    """
    
    @property
    def dimension(self) -> int:
        """Logical length of the vector."""
        ...
    
    @property
    def length(self) -> int:
        """Number of stored entries (equals dimension for dense vectors)."""
        ...
    
    @property
    def is_sparse(self) -> bool:
        ...
    
    def get(self, index: int) -> float:
        ...
    
    def set(self, index: int, value: float) -> None:
        ...
    
    def iterate(self) -> Iterator[VectorEntry]:
        """Every logical index 0..dimension-1, absent entries as 0.0."""
        ...
    
    def iterate_non_zero(self) -> Iterator[VectorEntry]:
        """Only stored (non-default) entries."""
        ...
    
    def add(self, other: DoubleVector | float) -> DoubleVector:
        ...
    
    def subtract(self, other: DoubleVector | float) -> DoubleVector:
        ...
    
    def multiply(self, other: DoubleVector | float) -> DoubleVector:
        ...
    
    def divide(self, other: DoubleVector | float) -> DoubleVector:
        ...
    
    def dot(self, other: DoubleVector) -> float:
        ...
    
    def sum(self) -> float:
        ...
    
    def to_array(self) -> NDArray[np.float64]:
        ...
    
    def deep_copy(self) -> DoubleVector:
        ...
    
    def apply(
        self,
        func: Callable[..., float],
        other: DoubleVector | None = None,
    ) -> DoubleVector:
        ...
    
    def supports(self, capability: str) -> bool:
        """
        Check if this vector supports a given capability.
        
        Note:
            Unknown capabilities MUST return False, never raise.
        """
        ...


@runtime_checkable
class DoubleMatrix(Protocol):
    """
    Capability surface shared by dense and sparse-row matrices.
    """
    
    @property
    def row_count(self) -> int:
        ...
    
    @property
    def column_count(self) -> int:
        ...
    
    @property
    def is_sparse(self) -> bool:
        ...
    
    def get(self, row: int, col: int) -> float:
        ...
    
    def set(self, row: int, col: int, value: float) -> None:
        ...
    
    def get_row_vector(self, row: int) -> DoubleVector:
        ...
    
    def get_column_vector(self, col: int) -> DoubleVector:
        ...
    
    def multiply(self, other: DoubleMatrix | float) -> DoubleMatrix:
        ...
    
    def transpose(self) -> DoubleMatrix:
        ...
    
    def row_indices(self) -> list[int]:
        ...
    
    def column_indices(self) -> list[int]:
        ...
    
    def to_array(self) -> NDArray[np.float64]:
        ...
    
    def deep_copy(self) -> DoubleMatrix:
        ...


# Binary element functions take (index, left, right), unary (index, value)
UnaryElementFunction = Callable[[int, float], float]
BinaryElementFunction = Callable[[int, float, float], float]

__all__ = [
    'VectorEntry',
    'DoubleVector',
    'DoubleMatrix',
    'UnaryElementFunction',
    'BinaryElementFunction',
]
