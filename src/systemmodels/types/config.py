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
Numeric Configuration

Library-wide numeric defaults:
- Element type of every model container
- Tolerance below which a leading denominator coefficient is rejected

Each model accepts per-instance overrides; these values are used when the
caller passes None.
"""

from typing import Optional, Tuple, Union

import numpy as np

from systemmodels.utils.validation import ValidationError

DTypeLike = Union[type, np.dtype, str]

DEFAULT_DTYPE = np.float64
"""
Default element type.

Float64 is the default for control applications. float32 matches the
single-precision arithmetic of small embedded targets.

Examples
--------
>>> dtype = DEFAULT_DTYPE  # np.float64
"""

SUPPORTED_DTYPES: Tuple[np.dtype, ...] = (np.dtype(np.float32), np.dtype(np.float64))
"""Element types accepted by the models."""

DEFAULT_DENOMINATOR_ATOL = 1e-12
"""
Smallest accepted magnitude of the leading denominator coefficient a[0].

|a[0]| <= DEFAULT_DENOMINATOR_ATOL is rejected at construction and in
set_den(), since a[0] divides every output sample.
"""


def resolve_dtype(dtype: Optional[DTypeLike] = None) -> np.dtype:
    """
    Resolve a user supplied element type.

    Parameters
    ----------
    dtype : Optional[DTypeLike]
        Requested dtype. None selects DEFAULT_DTYPE.

    Returns
    -------
    np.dtype
        Validated NumPy dtype

    Raises
    ------
    ValidationError
        If dtype is not one of SUPPORTED_DTYPES

    Examples
    --------
    >>> resolve_dtype()
    dtype('float64')
    >>> resolve_dtype("float32")
    dtype('float32')
    """
    if dtype is None:
        return np.dtype(DEFAULT_DTYPE)
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise ValidationError(f"Invalid dtype {dtype!r}") from e
    if resolved not in SUPPORTED_DTYPES:
        raise ValidationError(
            f"Unsupported dtype {resolved}. "
            f"Supported: {[str(d) for d in SUPPORTED_DTYPES]}"
        )
    return resolved


__all__ = [
    "DTypeLike",
    "DEFAULT_DTYPE",
    "SUPPORTED_DTYPES",
    "DEFAULT_DENOMINATOR_ATOL",
    "resolve_dtype",
]
