"""
Input validation utilities for PyLinear.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import operator
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.exceptions import (
    ValidationError,
    DimensionMismatchError,
    IndexOutOfRangeError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.
    
    Rejects inputs that result in object dtype (indicating mixed types or
    non-numeric data). Booleans and integers are promoted to float64.
    
    Args:
        array: Input to validate
        name: Parameter name for error messages
        
    Returns:
        numpy.ndarray with dtype float64
        
    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e
    
    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not (np.issubdtype(result.dtype, np.number) or result.dtype == np.bool_):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result.astype(np.float64, copy=True)


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.
    
    Raises:
        ValidationError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise ValidationError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_non_negative(value: int, name: str) -> None:
    """
    Verify a size argument is a non-negative integer.
    
    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")


def check_index(index: int, bound: int, name: str = "index") -> int:
    """
    Verify index is an integer with 0 <= index < bound.
    
    Negative indices are rejected rather than wrapped around. Floats are
    rejected even when integral (1.0), numpy integer scalars are accepted.
    
    Args:
        index: Index to check
        bound: Exclusive upper bound (dimension, rows or columns)
        name: Parameter name for error messages
        
    Returns:
        index as a plain int
        
    Raises:
        ValidationError: If index is not an integer
        IndexOutOfRangeError: If index falls outside [0, bound)
    """
    try:
        index = operator.index(index)
    except TypeError as e:
        raise ValidationError(
            f"{name}: expected an integer, got {type(index).__name__} {index!r}"
        ) from e
    if index < 0 or index >= bound:
        raise IndexOutOfRangeError(
            f"{name}: {index} out of range [0, {bound})",
            index=index,
            bound=bound,
        )
    return index


def check_same_dimension(left: int, right: int, operation: str) -> None:
    """
    Verify two vector operands share a dimension.
    
    Raises:
        DimensionMismatchError: If the dimensions differ
    """
    if left != right:
        raise DimensionMismatchError(
            f"{operation}: dimension mismatch, left={left}, right={right}",
            expected=left,
            actual=right,
            operation=operation,
        )


def check_same_shape(
    left: tuple[int, int],
    right: tuple[int, int],
    operation: str,
) -> None:
    """
    Verify two matrix operands share a shape.
    
    Raises:
        DimensionMismatchError: If the shapes differ
    """
    if left != right:
        raise DimensionMismatchError(
            f"{operation}: shape mismatch, left={left[0]}x{left[1]}, "
            f"right={right[0]}x{right[1]}",
            expected=left,
            actual=right,
            operation=operation,
        )


def check_inner_dimensions(
    left: tuple[int, int],
    right: tuple[int, int],
    operation: str = "multiply",
) -> None:
    """
    Verify left.cols == right.rows for a matrix product.
    
    Raises:
        DimensionMismatchError: If the inner dimensions differ
    """
    if left[1] != right[0]:
        raise DimensionMismatchError(
            f"{operation}: inner dimensions differ, "
            f"{left[0]}x{left[1]} cannot multiply {right[0]}x{right[1]}",
            expected=left[1],
            actual=right[0],
            operation=operation,
        )


def check_slice_bounds(start: int, end: int, dimension: int) -> None:
    """
    Verify 0 <= start <= end <= dimension.
    
    Raises:
        IndexOutOfRangeError: If the range does not fit the dimension
    """
    if start < 0 or end > dimension or start > end:
        raise IndexOutOfRangeError(
            f"slice: [{start}, {end}) is not a valid range within [0, {dimension})",
            index=start if start < 0 or start > end else end,
            bound=dimension,
        )
