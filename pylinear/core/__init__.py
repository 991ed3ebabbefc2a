"""
Core infrastructure for PyLinear.

Shared abstractions used by every vector and matrix representation.

Key components:
    protocols: DoubleVector, DoubleMatrix protocols and VectorEntry
    capabilities: Capability string constants
    exceptions: Exception hierarchy
    validation: Input validators
    compute: BLAS detection, multiply policy and kernels
"""

from pylinear.core.protocols import DoubleVector, DoubleMatrix, VectorEntry
from pylinear.core.exceptions import (
    LinearAlgebraError,
    ValidationError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    ImmutableOperationError,
    ConcurrentModificationError,
)

__all__ = [
    # Protocols
    "DoubleVector",
    "DoubleMatrix",
    "VectorEntry",
    # Exceptions
    "LinearAlgebraError",
    "ValidationError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "ImmutableOperationError",
    "ConcurrentModificationError",
]
