"""
Input validation utilities for subtypesurv.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
survival curves or guessing what the upstream pipeline meant.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from subtypesurv.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (mixed types) or in a
    non-numeric dtype (strings, bytes, datetimes).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}", field=name) from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data",
            field=name,
        )

    if result.dtype == bool or not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data",
            field=name,
        )

    return result.astype(np.float64)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)",
            field=name,
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    if array.ndim != 1:
        raise DimensionError(
            f"{name}: expected 1D array, got {array.ndim}D with shape {array.shape}",
            field=name,
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length.

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_non_empty(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array has at least one element.

    Raises:
        ValidationError: If array is empty
    """
    if array.shape[0] == 0:
        raise ValidationError(f"{name}: requires at least one point, got 0", field=name)


def check_non_negative(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every element is >= 0.

    Raises:
        ValidationError: If any element is negative
    """
    if np.any(array < 0):
        raise ValidationError(
            f"{name}: must be non-negative, got minimum {float(np.min(array))}",
            field=name,
        )


def check_counts(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every element is a non-negative whole number.

    Raises:
        ValidationError: If any element is negative or fractional
    """
    check_non_negative(array, name)
    if np.any(array != np.floor(array)):
        raise ValidationError(f"{name}: must contain whole numbers", field=name)


def check_positive_count(value: Any, name: str) -> int:
    """
    Validate a single group size.

    Args:
        value: Candidate group size
        name: Parameter name for error messages

    Returns:
        The value as int

    Raises:
        ValidationError: If value is not a positive whole number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ValidationError(
            f"{name}: expected a positive integer, got {type(value).__name__}",
            field=name,
        )
    if not np.isfinite(value) or value <= 0 or value != int(value):
        raise ValidationError(f"{name}: expected a positive integer, got {value}", field=name)
    return int(value)
