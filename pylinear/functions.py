"""
Element functions for DoubleVector.apply.

Unary functions take (index, value), binary ones (index, left, right).
"""

from __future__ import annotations

from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import BinaryElementFunction


def running_average(k: float) -> BinaryElementFunction:
    """
    Running average of two vectors, where k counts how many vectors are
    already folded into the left operand.
    
    Computes left + right/k - left/k, so that applying it to the current
    average and the k-th sample yields the average of all k samples.
    
    Args:
        k: Number of samples averaged after this update (k > 0)
    
    Returns:
        Binary element function for DoubleVector.apply(func, other)
    
    Raises:
        ValidationError: If k is not positive
    
    Example:
        >>> average = first.deep_copy()
        >>> for k, sample in enumerate(rest, start=2):
        ...     average = average.apply(running_average(k), sample)
    """
    if k <= 0:
        raise ValidationError(f"k: must be positive, got {k}")
    
    def calculate(index: int, left: float, right: float) -> float:
        return left + right / k - left / k
    
    return calculate


__all__ = ['running_average']
