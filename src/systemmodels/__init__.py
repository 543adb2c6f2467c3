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
systemmodels - Discrete-Time System Models for Control Loops

Fixed-size building blocks evaluated once per control tick:

- DiscreteTransferFunction: SISO digital filter in z⁻¹
- StateSpaceModel: MIMO linear discrete state-space model
- NonlinearDiscreteModel: abstract base for nonlinear plant models

Usage
-----
>>> import numpy as np
>>> from systemmodels import DiscreteTransferFunction, StateSpaceModel
>>>
>>> lowpass = DiscreteTransferFunction(num=[0.2], den=[1.0, -0.8])
>>> plant = StateSpaceModel(A=np.eye(2), B=np.eye(2), C=np.eye(2))
>>>
>>> for k in range(100):
...     y = plant(np.array([lowpass(1.0), 0.0]))
"""

from systemmodels.builtin import KinematicBicycleModel
from systemmodels.lti import DiscreteTransferFunction, StateSpaceModel
from systemmodels.nlti import NonlinearDiscreteModel
from systemmodels.types import DEFAULT_DENOMINATOR_ATOL, DEFAULT_DTYPE, DiscreteSimulationResult
from systemmodels.utils import ValidationError

__version__ = "1.0.0"

__all__ = [
    "DiscreteTransferFunction",
    "StateSpaceModel",
    "NonlinearDiscreteModel",
    "KinematicBicycleModel",
    "DiscreteSimulationResult",
    "ValidationError",
    "DEFAULT_DTYPE",
    "DEFAULT_DENOMINATOR_ATOL",
]
