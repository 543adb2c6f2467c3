# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Model Validation - Fixed-Size Container Checks

Converts user input to NumPy containers of a fixed shape and rejects
anything that does not fit:
- Vector and matrix shape checks (the dimensions a model was built with)
- Finite-coefficient checks
- Leading denominator precondition for transfer functions
- Time step checks for nonlinear models

Every failure raises ValidationError, which is a ValueError so callers can
catch either.
"""

import warnings
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

if TYPE_CHECKING:
    from systemmodels.types.core import ArrayLike

# ============================================================================
# Exceptions
# ============================================================================


class ValidationError(ValueError):
    """Raised when a model is built or updated with invalid data"""
    pass


# ============================================================================
# Shape Checks
# ============================================================================


def as_vector(
    value: "ArrayLike",
    size: Optional[int],
    name: str,
    dtype: np.dtype,
) -> np.ndarray:
    """
    Convert value to a 1-D array of the given size.

    Column (n, 1) and row (1, n) vectors are flattened; scalars are accepted
    when size is 1.

    Parameters
    ----------
    value : ArrayLike
        Input data
    size : Optional[int]
        Required length. None accepts any non-empty length.
    name : str
        Name used in error messages
    dtype : np.dtype
        Element type of the returned array

    Returns
    -------
    np.ndarray
        New array of shape (size,)

    Raises
    ------
    ValidationError
        If value cannot be converted or has the wrong size

    Examples
    --------
    >>> as_vector([[1.0], [2.0]], 2, "x0", np.dtype(np.float64))
    array([1., 2.])
    """
    try:
        arr = np.array(value, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric, got {value!r}") from e

    if arr.ndim == 0:
        arr = arr.reshape(1)
    elif arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    elif arr.ndim != 1:
        raise ValidationError(f"{name} must be a vector, got shape {arr.shape}")

    if arr.size == 0:
        raise ValidationError(f"{name} must not be empty")
    if size is not None and arr.shape[0] != size:
        raise ValidationError(f"{name} must have {size} elements, got {arr.shape[0]}")
    return arr


def as_matrix(
    value: "ArrayLike",
    shape: Tuple[Optional[int], Optional[int]],
    name: str,
    dtype: np.dtype,
) -> np.ndarray:
    """
    Convert value to a 2-D array of the given shape.

    Parameters
    ----------
    value : ArrayLike
        Input data
    shape : Tuple[Optional[int], Optional[int]]
        Required (rows, cols). None leaves that dimension free.
    name : str
        Name used in error messages
    dtype : np.dtype
        Element type of the returned array

    Returns
    -------
    np.ndarray
        New array of the requested shape

    Raises
    ------
    ValidationError
        If value is not 2-D or a fixed dimension does not match

    Examples
    --------
    >>> as_matrix(np.eye(2), (2, 2), "A", np.dtype(np.float64)).shape
    (2, 2)
    """
    try:
        arr = np.array(value, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric, got {value!r}") from e

    if arr.ndim != 2:
        raise ValidationError(f"{name} must be a 2-D matrix, got shape {arr.shape}")

    rows, cols = shape
    expected = (
        rows if rows is not None else arr.shape[0],
        cols if cols is not None else arr.shape[1],
    )
    if arr.shape != expected:
        raise ValidationError(f"{name} must be {expected}, got {arr.shape}")
    return arr


def check_finite(arr: np.ndarray, name: str) -> None:
    """Raise ValidationError if arr holds NaN or inf."""
    if not np.all(np.isfinite(arr)):
        raise ValidationError(f"{name} must contain only finite values, got {arr}")


# ============================================================================
# Model Preconditions
# ============================================================================


def check_leading_coefficient(coefficient: float, atol: float) -> None:
    """
    Check the leading denominator coefficient of a transfer function.

    a[0] divides every output sample, so it must be clearly nonzero.

    Parameters
    ----------
    coefficient : float
        Leading coefficient a[0]
    atol : float
        Smallest accepted magnitude

    Raises
    ------
    ValidationError
        If |a[0]| <= atol

    Examples
    --------
    >>> check_leading_coefficient(1.0, 1e-12)
    >>> check_leading_coefficient(0.0, 1e-12)
    Traceback (most recent call last):
    ...
    systemmodels.utils.validation.ValidationError: ...
    """
    if not abs(coefficient) > atol:
        raise ValidationError(
            f"Leading denominator coefficient must be nonzero "
            f"(|a[0]| > {atol}), got {coefficient}"
        )


def check_time_step(dt: float) -> float:
    """
    Check a sampling period.

    Returns
    -------
    float
        dt as a Python float

    Raises
    ------
    ValidationError
        If dt is not a positive finite number
    """
    return check_positive(dt, "dt")


def check_positive(value: float, name: str) -> float:
    """
    Check a physical parameter or period that must be positive.

    Returns
    -------
    float
        value as a Python float

    Raises
    ------
    ValidationError
        If value is not a positive finite number
    """
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e
    if not np.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be positive and finite, got {value}")
    return value


def check_tolerance(atol: float, name: str = "atol") -> float:
    """
    Check an absolute tolerance: finite and non-negative.

    Raises
    ------
    ValidationError
        If atol is negative, NaN, infinite or not a number
    """
    try:
        atol = float(atol)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {atol!r}") from e
    if not np.isfinite(atol) or atol < 0:
        raise ValidationError(f"{name} must be finite and >= 0, got {atol}")
    return atol


# ============================================================================
# Runtime Diagnostics
# ============================================================================


def warn_if_not_finite(arr: np.ndarray, name: str) -> None:
    """
    Issue a RuntimeWarning when a computed value is NaN or inf.

    Runtime overflow (e.g. an unstable model driven long enough) is reported
    but not raised; the value is still returned to the control loop.
    """
    if not np.all(np.isfinite(arr)):
        warnings.warn(
            f"{name} contains non-finite values: {arr}. "
            f"Check the model for instability or invalid inputs.",
            RuntimeWarning,
            stacklevel=3,
        )


__all__ = [
    "ValidationError",
    "as_vector",
    "as_matrix",
    "check_finite",
    "check_leading_coefficient",
    "check_time_step",
    "check_positive",
    "check_tolerance",
    "warn_if_not_finite",
]
