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
Nonlinear Discrete-Time Model (MIMO)
====================================

Abstract base class for nonlinear time-invariant discrete models:

    x[k+1] = f(x[k], u[k])
    y[k]   = h(x[k], u[k])

Concrete plant models (kinematic vehicle models, motor models, ...) derive
from NonlinearDiscreteModel so a control loop or estimator can program
against one interface.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

import numpy as np

from systemmodels.types.config import DTypeLike, resolve_dtype
from systemmodels.types.core import ArrayLike, ControlVector, OutputVector, StateVector
from systemmodels.utils.validation import ValidationError, as_vector, check_time_step


class NonlinearDiscreteModel(ABC):
    """
    Abstract base class for nonlinear discrete-time MIMO models.

    Subclasses must define:
    1. nx, nu, ny (class attributes): state, control and output sizes
    2. update(u): state transition, returns the next state
    3. calculate_output(u): observation, returns the output

    The base class holds the state vector, the output vector and the fixed
    time step.

    State synchronization
    ---------------------
    update() and calculate_output() only *compute* values. Committing them
    to the stored state/output is up to the caller (set_states()) or the
    subclass (assigning self._states / self._outputs). A caller can thus
    inspect a candidate next state before accepting it. step() is a
    convenience that commits both.

    Examples
    --------
    >>> class Accumulator(NonlinearDiscreteModel):
    ...     nx, nu, ny = 2, 2, 2
    ...
    ...     def update(self, u):
    ...         return self._states + self._check_control(u)
    ...
    ...     def calculate_output(self, u):
    ...         return self._states.copy()
    >>>
    >>> model = Accumulator(dt=0.01)
    >>> x_next = model.update(np.array([1.0, 2.0]))
    >>> model.set_states(x_next)
    """

    nx: ClassVar[int]
    nu: ClassVar[int]
    ny: ClassVar[int]

    def __init__(
        self,
        dt: float,
        states: Optional[ArrayLike] = None,
        dtype: Optional[DTypeLike] = None,
    ):
        """
        Parameters
        ----------
        dt : float
            Sampling period in seconds; fixed for the model's lifetime
        states : Optional[ArrayLike]
            Initial state (nx,). Zero if None.
        dtype : Optional[DTypeLike]
            Element type (float64 by default)

        Raises
        ------
        ValidationError
            If dt is not positive and finite, the subclass does not declare
            its dimensions, or states has the wrong size
        """
        for attr in ("nx", "nu", "ny"):
            value = getattr(type(self), attr, None)
            if not isinstance(value, (int, np.integer)) or value < 1:
                raise ValidationError(
                    f"{type(self).__name__} must declare a positive integer "
                    f"class attribute '{attr}', got {value!r}"
                )

        self._dtype = resolve_dtype(dtype)
        self._dt = check_time_step(dt)
        self._states: StateVector = np.zeros(self.nx, dtype=self._dtype)
        self._outputs: OutputVector = np.zeros(self.ny, dtype=self._dtype)
        if states is not None:
            self.set_states(states)

    # =========================================================================
    # Abstract Methods (MUST be implemented by subclasses)
    # =========================================================================

    @abstractmethod
    def update(self, u: ControlVector) -> StateVector:
        """
        State transition model: compute x[k+1] from the stored state and u.

        Parameters
        ----------
        u : ControlVector
            Control input (nu,)

        Returns
        -------
        StateVector
            Next state (nx,). Whether it is also written to the stored
            state is up to the implementation.
        """
        pass

    @abstractmethod
    def calculate_output(self, u: ControlVector) -> OutputVector:
        """
        Observation model: compute y from the stored state and u.

        Parameters
        ----------
        u : ControlVector
            Control input (nu,)

        Returns
        -------
        OutputVector
            Observation (ny,). Whether it is also written to the stored
            output is up to the implementation.
        """
        pass

    # =========================================================================
    # Concrete Methods
    # =========================================================================

    def step(self, u: ArrayLike) -> OutputVector:
        """
        One committed tick: store update(u), then store calculate_output(u).

        Returns
        -------
        OutputVector
            The stored output (copy)
        """
        u = self._check_control(u)
        self.set_states(self.update(u))
        self._outputs = as_vector(self.calculate_output(u), self.ny, "output", self._dtype)
        return self.get_output()

    def get_states(self) -> StateVector:
        """Current system state (copy)."""
        return self._states.copy()

    def get_output(self) -> OutputVector:
        """Last stored system output (copy)."""
        return self._outputs.copy()

    def get_time_step(self) -> float:
        """Sampling period in seconds."""
        return self._dt

    def set_states(self, states: ArrayLike) -> None:
        """
        Overwrite the stored state, e.g. with an estimator correction.

        Raises
        ------
        ValidationError
            If states does not have nx elements
        """
        self._states = as_vector(states, self.nx, "states", self._dtype)

    def _check_control(self, u: ArrayLike) -> ControlVector:
        """Coerce u to a (nu,) vector of the model dtype."""
        return as_vector(u, self.nu, "u", self._dtype)

    @property
    def dt(self) -> float:
        """Sampling period in seconds (read-only)."""
        return self._dt

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(nx={self.nx}, nu={self.nu}, ny={self.ny}, "
            f"dt={self._dt})"
        )
