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
Discrete-time Kinematic Bicycle - Car-like Vehicle Model.

Rear-axle referenced kinematic bicycle model of a car-like robot, the usual
plant model for path tracking and state estimation on small autonomous
vehicles. Valid at low speed, where tire slip is negligible.
"""

from typing import Optional

import numpy as np

from systemmodels.nlti.mimo.discrete_time_model import NonlinearDiscreteModel
from systemmodels.types.config import DTypeLike
from systemmodels.types.core import ArrayLike, ControlVector, OutputVector, StateVector
from systemmodels.utils.validation import check_positive


class KinematicBicycleModel(NonlinearDiscreteModel):
    """
    Forward-Euler kinematic bicycle model.

    State:   x = [p_x, p_y, ψ]   (position in m, heading in rad)
    Control: u = [v, δ]          (speed in m/s, steering angle in rad)
    Output:  y = x               (full state observation)

    Dynamics:

        p_x[k+1] = p_x[k] + dt · v cos(ψ[k])
        p_y[k+1] = p_y[k] + dt · v sin(ψ[k])
        ψ[k+1]   = ψ[k]   + dt · v tan(δ) / L

    Parameters
    ----------
    dt : float
        Sampling period [s]
    wheelbase : float
        Distance L between front and rear axle [m], positive
    states : Optional[ArrayLike]
        Initial pose [p_x, p_y, ψ]
    dtype : Optional[DTypeLike]
        Element type

    Notes
    -----
    update() returns the candidate pose without storing it, so an
    estimator can use it as a prediction. calculate_output() stores and
    returns the current pose.

    Examples
    --------
    >>> car = KinematicBicycleModel(dt=0.02, wheelbase=0.26)
    >>> for k in range(50):
    ...     car.set_states(car.update([1.0, 0.1]))
    >>> pose = car.calculate_output([1.0, 0.1])
    """

    nx = 3
    nu = 2
    ny = 3

    def __init__(
        self,
        dt: float,
        wheelbase: float,
        states: Optional[ArrayLike] = None,
        dtype: Optional[DTypeLike] = None,
    ):
        self.wheelbase = check_positive(wheelbase, "wheelbase")
        super().__init__(dt, states=states, dtype=dtype)

    def update(self, u: ControlVector) -> StateVector:
        speed, steering = self._check_control(u)
        heading = self._states[2]
        x_dot = np.array(
            [
                speed * np.cos(heading),
                speed * np.sin(heading),
                speed * np.tan(steering) / self.wheelbase,
            ],
            dtype=self._dtype,
        )
        return self._states + self._dt * x_dot

    def calculate_output(self, u: ControlVector) -> OutputVector:
        self._check_control(u)
        self._outputs = self._states.copy()
        return self._outputs.copy()

    def turning_radius(self, steering: float) -> float:
        """
        Radius of the circle driven at constant steering angle.

        Returns np.inf for straight driving (δ = 0).
        """
        if steering == 0:
            return np.inf
        return abs(self.wheelbase / np.tan(steering))
