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
Trajectory Types

Result containers for multi-tick runs of the discrete models.
"""

from typing import Any, Dict

import numpy as np
from typing_extensions import TypedDict


class DiscreteSimulationResult(TypedDict, total=False):
    """
    Result from running a discrete-time model over a control sequence.

    All arrays are **time-major**.

    Attributes
    ----------
    states : np.ndarray
        State trajectory (n_steps+1, nx). Row 0 is the state before the
        first tick.
    outputs : np.ndarray
        Output sequence (n_steps, ny). Row k is the output returned by
        tick k, i.e. computed from the post-update state.
    controls : np.ndarray
        Control sequence applied (n_steps, nu)
    time_steps : np.ndarray
        Tick indices [0, 1, ..., n_steps]
    dt : float
        Sampling period (1.0 for models without a time step)
    metadata : Dict[str, Any]
        Additional information, e.g. {'method': 'step'}

    Examples
    --------
    >>> result = model.simulate(np.ones((50, 1)))
    >>> y_final = result['outputs'][-1]
    >>> x_traj = result['states'][:, 0]
    """

    states: np.ndarray
    outputs: np.ndarray
    controls: np.ndarray
    time_steps: np.ndarray
    dt: float
    metadata: Dict[str, Any]


__all__ = ["DiscreteSimulationResult"]
