"""
Exception hierarchy for PyLinear.

All exceptions inherit from LinearAlgebraError to allow catching any
library-specific error. Every error is raised at the point of misuse,
before any state has been mutated.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Floating point results (inf, nan) are values, never errors
"""


class LinearAlgebraError(Exception):
    """Base exception for all PyLinear errors."""
    pass


class ValidationError(LinearAlgebraError):
    """
    Input validation failed.
    
    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionMismatchError(ValidationError):
    """
    Operand shapes are incompatible for the requested operation.
    
    Raised before any result is written, e.g. adding vectors of different
    dimension or multiplying matrices whose inner dimensions differ.
    
    Attributes:
        expected: The dimension (or shape) the operation required
        actual: The dimension (or shape) that was supplied
        operation: Name of the operation that was attempted
    """
    
    def __init__(
        self,
        message: str,
        expected: int | tuple[int, ...] | None = None,
        actual: int | tuple[int, ...] | None = None,
        operation: str | None = None
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.operation = operation


class IndexOutOfRangeError(ValidationError, IndexError):
    """
    Index lies outside the valid range of a vector or matrix axis.
    
    Also an IndexError, so code written against plain sequences keeps
    working.
    
    Attributes:
        index: The offending index
        bound: Exclusive upper bound of the valid range [0, bound)
    """
    
    def __init__(
        self,
        message: str,
        index: int | None = None,
        bound: int | None = None
    ):
        super().__init__(message)
        self.index = index
        self.bound = bound


class ImmutableOperationError(LinearAlgebraError):
    """
    Mutation attempted on an immutable structure.
    
    Attributes:
        operation: Name of the rejected mutator
    """
    
    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class ConcurrentModificationError(LinearAlgebraError):
    """
    A sparse structure was mutated while being iterated.
    
    Iterators over sparse storage fail fast instead of yielding entries
    from an inconsistent state.
    """
    pass
