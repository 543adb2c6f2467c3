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
Core Types - Fundamental Building Blocks

Semantic aliases for the fixed-size arrays the models exchange with the
control loop:
- Scalar samples for SISO filters
- State, control and output vectors
- System matrices (A, B, C, D) and coefficient vectors

All containers are NumPy arrays. Their sizes are fixed when a model is
built and checked on every assignment afterwards.

Usage
-----
>>> from systemmodels.types.core import StateVector, StateMatrix
>>>
>>> def propagate(A: StateMatrix, x: StateVector) -> StateVector:
...     return A @ x
"""

from typing import Sequence, Union

import numpy as np


# ============================================================================
# Basic Array Types
# ============================================================================

ArrayLike = Union[np.ndarray, Sequence[float]]
"""
Anything NumPy can turn into a numeric array.

Accepted by every constructor and setter; stored internally as np.ndarray.
"""

ScalarLike = Union[float, int, np.number]
"""
Scalar sample value.

Examples
--------
>>> u: ScalarLike = 0.5
>>> dt: ScalarLike = 0.01
"""


# ============================================================================
# Vector Types - Semantic Naming by Role
# ============================================================================

StateVector = np.ndarray
"""
State vector x ∈ ℝⁿˣ, shape (nx,).

Examples
--------
>>> x: StateVector = np.array([1.0, 0.0, 0.5])
"""

ControlVector = np.ndarray
"""
Control input vector u ∈ ℝⁿᵘ, shape (nu,).

Examples
--------
>>> u: ControlVector = np.array([0.5])
"""

OutputVector = np.ndarray
"""
Output/observation vector y ∈ ℝⁿʸ, shape (ny,).

Examples
--------
>>> y: OutputVector = np.array([1.0, 0.0])  # y = C x
"""

CoefficientVector = np.ndarray
"""
Polynomial coefficients in z⁻¹, shape (n,).

Index 0 multiplies z⁰, index i multiplies z⁻ⁱ.

Examples
--------
>>> # 1 + 0.5 z⁻¹
>>> den: CoefficientVector = np.array([1.0, 0.5])
"""

MemoryVector = np.ndarray
"""
History buffer of past samples, index 0 = most recent.
"""


# ============================================================================
# Matrix Types - Semantic Naming by Role
# ============================================================================

StateMatrix = np.ndarray
"""State transition matrix A (nx, nx): x[k+1] = A x[k] + B u[k]."""

InputMatrix = np.ndarray
"""Input matrix B (nx, nu)."""

OutputMatrix = np.ndarray
"""Measurement matrix C (ny, nx): y[k] = C x[k] + D u[k]."""

FeedthroughMatrix = np.ndarray
"""
Direct transfer matrix D (ny, nu).

Zero when the system has no feed-through from input to output.
"""


__all__ = [
    "ArrayLike",
    "ScalarLike",
    "StateVector",
    "ControlVector",
    "OutputVector",
    "CoefficientVector",
    "MemoryVector",
    "StateMatrix",
    "InputMatrix",
    "OutputMatrix",
    "FeedthroughMatrix",
]
