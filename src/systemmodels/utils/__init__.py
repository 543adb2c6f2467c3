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

"""Validation helpers shared by all models."""

from .validation import (
    ValidationError,
    as_matrix,
    as_vector,
    check_finite,
    check_leading_coefficient,
    check_positive,
    check_time_step,
    check_tolerance,
    warn_if_not_finite,
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
