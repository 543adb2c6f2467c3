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
Linear Discrete State-Space Model (MIMO)
========================================

Linear time-invariant discrete system:

    x[k+1] = A x[k] + B u[k]
    y[k]   = C x[k] + D u[k]

where
    - x ∈ ℝⁿˣ is the state,
    - u ∈ ℝⁿᵘ is the control input,
    - y ∈ ℝⁿʸ is the observation.

The matrices are fixed when the model is built. The state vector is the
only mutable part and is updated in place once per control tick.
"""

from typing import Optional

import numpy as np

from systemmodels.types.config import DTypeLike, resolve_dtype
from systemmodels.types.core import (
    ArrayLike,
    ControlVector,
    FeedthroughMatrix,
    InputMatrix,
    OutputMatrix,
    OutputVector,
    StateMatrix,
    StateVector,
)
from systemmodels.types.trajectories import DiscreteSimulationResult
from systemmodels.utils.validation import (
    ValidationError,
    as_matrix,
    as_vector,
    warn_if_not_finite,
)


class StateSpaceModel:
    """
    MIMO linear discrete state-space model with in-place state update.

    Parameters
    ----------
    A : ArrayLike
        State transition matrix (nx, nx)
    B : ArrayLike
        Input matrix (nx, nu)
    C : ArrayLike
        Measurement matrix (ny, nx)
    D : Optional[ArrayLike]
        Direct transfer matrix (ny, nu). Zero (no feed-through) if None.
    x0 : Optional[ArrayLike]
        Initial state (nx,). Zero if None.
    dtype : Optional[DTypeLike]
        Element type (float64 by default)

    Raises
    ------
    ValidationError
        If the matrix dimensions are not mutually consistent

    Notes
    -----
    step() first updates the state and then computes the output from the
    *updated* state:

        x ← A x + B u
        y  = C x + D u

    so the observation returned by a tick reflects the new state, not the
    one used to compute it.

    Examples
    --------
    Discrete double integrator with position output:

    >>> dt = 0.1
    >>> A = np.array([[1.0, dt], [0.0, 1.0]])
    >>> B = np.array([[0.5 * dt**2], [dt]])
    >>> C = np.array([[1.0, 0.0]])
    >>> model = StateSpaceModel(A, B, C)
    >>>
    >>> for k in range(100):
    ...     y = model(np.array([1.0]))
    >>>
    >>> model.state = np.zeros(2)  # reseed from an estimator
    """

    def __init__(
        self,
        A: ArrayLike,
        B: ArrayLike,
        C: ArrayLike,
        D: Optional[ArrayLike] = None,
        x0: Optional[ArrayLike] = None,
        dtype: Optional[DTypeLike] = None,
    ):
        self._dtype = resolve_dtype(dtype)

        A = as_matrix(A, (None, None), "A", self._dtype)
        nx = A.shape[0]
        if A.shape != (nx, nx):
            raise ValidationError(f"A must be square, got shape {A.shape}")
        B = as_matrix(B, (nx, None), "B", self._dtype)
        nu = B.shape[1]
        C = as_matrix(C, (None, nx), "C", self._dtype)
        ny = C.shape[0]
        if D is None:
            D = np.zeros((ny, nu), dtype=self._dtype)
        else:
            D = as_matrix(D, (ny, nu), "D", self._dtype)

        for M in (A, B, C, D):
            M.setflags(write=False)

        self._A: StateMatrix = A
        self._B: InputMatrix = B
        self._C: OutputMatrix = C
        self._D: FeedthroughMatrix = D

        self._state: StateVector = np.zeros(nx, dtype=self._dtype)
        if x0 is not None:
            self.state = x0

    # ========================================================================
    # Per-tick Operations
    # ========================================================================

    def update_state(self, u: ArrayLike) -> None:
        """
        Advance the state one tick: x ← A x + B u.

        Mutates the state vector in place using the current state and u.

        Parameters
        ----------
        u : ArrayLike
            Control input (nu,)
        """
        self._advance(self._check_control(u))

    def get_output(self, u: ArrayLike) -> OutputVector:
        """
        Observation of the current state: y = C x + D u.

        Pure function of the stored state and u; the state is not changed.

        Parameters
        ----------
        u : ArrayLike
            Control input (nu,)

        Returns
        -------
        OutputVector
            Observation (ny,)
        """
        return self._observe(self._check_control(u))

    def step(self, u: ArrayLike) -> OutputVector:
        """
        One control tick: update the state, then observe the updated state.

        Parameters
        ----------
        u : ArrayLike
            Control input (nu,)

        Returns
        -------
        OutputVector
            y computed from the post-update state (ny,)
        """
        u = self._check_control(u)
        self._advance(u)
        return self._observe(u)

    def __call__(self, u: ArrayLike) -> OutputVector:
        """Alias for step()."""
        return self.step(u)

    def simulate(
        self,
        u_sequence: ArrayLike,
        x0: Optional[ArrayLike] = None,
    ) -> DiscreteSimulationResult:
        """
        Run step() over a control sequence.

        Parameters
        ----------
        u_sequence : ArrayLike
            Controls, time-major (n_steps, nu). A 1-D array is read as
            (n_steps,) when nu == 1.
        x0 : Optional[ArrayLike]
            State to start from. The current state is used if None.

        Returns
        -------
        DiscreteSimulationResult
            Time-major states (n_steps+1, nx), outputs (n_steps, ny) and
            controls (n_steps, nu). The model keeps the final state.

        Examples
        --------
        >>> result = model.simulate(np.ones((50, 1)), x0=np.zeros(2))
        >>> result['outputs'].shape
        (50, 1)
        """
        u_seq = np.asarray(u_sequence, dtype=self._dtype)
        if u_seq.ndim == 1 and self.nu == 1:
            u_seq = u_seq.reshape(-1, 1)
        u_seq = as_matrix(u_seq, (None, self.nu), "u_sequence", self._dtype)

        if x0 is not None:
            self.state = x0

        n_steps = u_seq.shape[0]
        states = np.empty((n_steps + 1, self.nx), dtype=self._dtype)
        outputs = np.empty((n_steps, self.ny), dtype=self._dtype)
        states[0] = self._state

        for k in range(n_steps):
            outputs[k] = self.step(u_seq[k])
            states[k + 1] = self._state

        return DiscreteSimulationResult(
            states=states,
            outputs=outputs,
            controls=u_seq,
            time_steps=np.arange(n_steps + 1),
            dt=1.0,
            metadata={"method": "step"},
        )

    def reset(self, x0: Optional[ArrayLike] = None) -> None:
        """Set the state to x0, or to zero if x0 is None."""
        if x0 is None:
            self._state.fill(0)
        else:
            self.state = x0

    def _check_control(self, u: ArrayLike) -> ControlVector:
        return as_vector(u, self.nu, "u", self._dtype)

    def _advance(self, u: ControlVector) -> None:
        # u already validated
        self._state[:] = self._A @ self._state + self._B @ u
        warn_if_not_finite(self._state, "State vector")

    def _observe(self, u: ControlVector) -> OutputVector:
        return self._C @ self._state + self._D @ u

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def state(self) -> StateVector:
        """
        Current state vector (nx,).

        The returned array is the live state; writing into it changes the
        model. Assigning to the property copies the new value in after a
        shape check.
        """
        return self._state

    @state.setter
    def state(self, x: ArrayLike) -> None:
        self._state[:] = as_vector(x, self.nx, "state", self._dtype)

    @property
    def A(self) -> StateMatrix:
        """State transition matrix (read-only)."""
        return self._A

    @property
    def B(self) -> InputMatrix:
        """Input matrix (read-only)."""
        return self._B

    @property
    def C(self) -> OutputMatrix:
        """Measurement matrix (read-only)."""
        return self._C

    @property
    def D(self) -> FeedthroughMatrix:
        """Direct transfer matrix (read-only)."""
        return self._D

    @property
    def nx(self) -> int:
        return self._A.shape[0]

    @property
    def nu(self) -> int:
        return self._B.shape[1]

    @property
    def ny(self) -> int:
        return self._C.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def __repr__(self) -> str:
        return (
            f"StateSpaceModel(nx={self.nx}, nu={self.nu}, ny={self.ny}, "
            f"dtype={self._dtype})"
        )
