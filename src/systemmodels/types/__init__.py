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
Types Module

Central import point for array aliases, numeric configuration and
result containers.

Module Organization
------------------
- core: semantic vector and matrix aliases
- config: default dtype, tolerances
- trajectories: simulation result containers
"""

from .config import (
    DEFAULT_DENOMINATOR_ATOL,
    DEFAULT_DTYPE,
    SUPPORTED_DTYPES,
    DTypeLike,
    resolve_dtype,
)
from .core import (
    ArrayLike,
    CoefficientVector,
    ControlVector,
    FeedthroughMatrix,
    InputMatrix,
    MemoryVector,
    OutputMatrix,
    OutputVector,
    ScalarLike,
    StateMatrix,
    StateVector,
)
from .trajectories import DiscreteSimulationResult

__all__ = [
    # core
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
    # config
    "DTypeLike",
    "DEFAULT_DTYPE",
    "SUPPORTED_DTYPES",
    "DEFAULT_DENOMINATOR_ATOL",
    "resolve_dtype",
    # trajectories
    "DiscreteSimulationResult",
]
