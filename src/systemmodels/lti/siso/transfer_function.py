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
Discrete Transfer Function (SISO)
=================================

Digital filter in the unit-delay operator z⁻¹:

    y(z)     b[0] + b[1] z⁻¹ + ... + b[n_num-1] z⁻⁽ⁿⁿᵘᵐ⁻¹⁾
    ----  =  -------------------------------------------
    u(z)     a[0] + a[1] z⁻¹ + ... + a[n_den-1] z⁻⁽ⁿᵈᵉⁿ⁻¹⁾

evaluated one sample per control tick with the recurrence

    a[0] y[k] = Σᵢ b[i] u[k-i] - Σⱼ₌₁ a[j] y[k-j]

Memory convention
-----------------
Index 0 is always the most recent sample:

- input_memory[i]  = u[k-i]        (n_num samples, includes the current one)
- output_memory[j] = y[k-j]        (n_den-1 samples, after evaluation)

This matches scipy.signal.lfilter, so a freshly constructed filter fed a
sequence reproduces lfilter(b, a, sequence).
"""

from typing import Optional, Sequence

import numpy as np

from systemmodels.types.config import DEFAULT_DENOMINATOR_ATOL, DTypeLike, resolve_dtype
from systemmodels.types.core import ArrayLike, CoefficientVector, MemoryVector, ScalarLike
from systemmodels.utils.validation import (
    ValidationError,
    as_vector,
    check_finite,
    check_leading_coefficient,
    check_tolerance,
    warn_if_not_finite,
)


class DiscreteTransferFunction:
    """
    SISO transfer function in z⁻¹ with fixed-size coefficient and history
    buffers.

    The numerator and denominator lengths are fixed at construction.
    Coefficients may later be replaced by vectors of the same length; the
    input/output history is kept across such replacements.

    Parameters
    ----------
    num : ArrayLike
        Numerator coefficients b, shape (n_num,)
    den : ArrayLike
        Denominator coefficients a, shape (n_den,). a[0] must be nonzero.
    dtype : Optional[DTypeLike]
        Element type (float64 by default)
    atol : Optional[float]
        Smallest accepted |a[0]| (DEFAULT_DENOMINATOR_ATOL by default)

    Raises
    ------
    ValidationError
        If a coefficient vector is empty or non-finite, or |a[0]| <= atol,
        or atol is negative or not finite

    Examples
    --------
    First-order low-pass, y[k] = 0.5 y[k-1] + 0.5 u[k]:

    >>> tf = DiscreteTransferFunction(num=[0.5], den=[1.0, -0.5])
    >>> tf(1.0)
    0.5
    >>> tf(1.0)
    0.75
    >>> tf.get_output()
    0.75

    Per-tick use in a control loop:

    >>> for k in range(n_ticks):
    ...     y_filtered = tf(read_sensor())
    """

    def __init__(
        self,
        num: ArrayLike,
        den: ArrayLike,
        dtype: Optional[DTypeLike] = None,
        atol: Optional[float] = None,
    ):
        self._dtype = resolve_dtype(dtype)
        self._atol = DEFAULT_DENOMINATOR_ATOL if atol is None else check_tolerance(atol)

        num_arr = self._check_num(num, None)
        den_arr = self._check_den(den, None)

        self._num: CoefficientVector = num_arr
        self._den_leading = den_arr[0]
        self._den: CoefficientVector = den_arr[1:]

        self._input_memory: MemoryVector = np.zeros(num_arr.shape[0], dtype=self._dtype)
        self._output_memory: MemoryVector = np.zeros(den_arr.shape[0] - 1, dtype=self._dtype)
        self._output = self._dtype.type(0)

    @classmethod
    def from_order(
        cls,
        n_num: int,
        n_den: int,
        dtype: Optional[DTypeLike] = None,
    ) -> "DiscreteTransferFunction":
        """
        Create a filter of the given sizes with neutral coefficients.

        The numerator is all zeros and the denominator is [1, 0, ..., 0],
        so the filter outputs zero until set_num() is called.

        Parameters
        ----------
        n_num : int
            Number of numerator coefficients (>= 1)
        n_den : int
            Number of denominator coefficients (>= 1)
        dtype : Optional[DTypeLike]
            Element type

        Examples
        --------
        >>> tf = DiscreteTransferFunction.from_order(2, 2)
        >>> tf.set_num([0.1, 0.1])
        >>> tf.set_den([1.0, -0.8])
        """
        if n_num < 1 or n_den < 1:
            raise ValidationError(
                f"n_num and n_den must be >= 1, got n_num={n_num}, n_den={n_den}"
            )
        den = np.zeros(n_den)
        den[0] = 1.0
        return cls(np.zeros(n_num), den, dtype=dtype)

    # ========================================================================
    # Evaluation
    # ========================================================================

    def evaluate(self, u: ScalarLike) -> ScalarLike:
        """
        Apply the filter to the next input sample.

        Shifts the input memory and inserts u, computes the new output from
        the coefficients and both memories, then shifts the output memory
        and inserts the new output.

        Parameters
        ----------
        u : ScalarLike
            Input sample u[k]

        Returns
        -------
        ScalarLike
            Output sample y[k] (a NumPy scalar of the filter dtype)

        Raises
        ------
        ValidationError
            If u is not a single numeric sample
        """
        u = as_vector(u, 1, "u", self._dtype)[0]
        self._shift(self._input_memory, u)

        acc = np.dot(self._num, self._input_memory)
        if self._den.size:
            acc -= np.dot(self._den, self._output_memory)
        y = self._dtype.type(acc / self._den_leading)

        if self._output_memory.size:
            self._shift(self._output_memory, y)
        self._output = y
        warn_if_not_finite(np.asarray(y), "Transfer function output")
        return y

    def __call__(self, u: ScalarLike) -> ScalarLike:
        """Alias for evaluate(); one call per control tick."""
        return self.evaluate(u)

    def simulate(self, u_sequence: Sequence[ScalarLike]) -> np.ndarray:
        """
        Feed a sequence of samples through the filter.

        The filter memory carries over from previous calls and is left in
        the state reached after the last sample.

        Parameters
        ----------
        u_sequence : Sequence[ScalarLike]
            Input samples, shape (n_steps,)

        Returns
        -------
        np.ndarray
            Output samples, shape (n_steps,)

        Examples
        --------
        >>> tf = DiscreteTransferFunction([1.0], [1.0])
        >>> tf.simulate([1.0, 2.0, 3.0])
        array([1., 2., 3.])
        """
        u_arr = np.asarray(u_sequence, dtype=self._dtype).reshape(-1)
        y = np.empty_like(u_arr)
        for k, u_k in enumerate(u_arr):
            y[k] = self.evaluate(u_k)
        return y

    def clear_memory(self) -> None:
        """Zero both history buffers and the last output."""
        self._input_memory.fill(0)
        self._output_memory.fill(0)
        self._output = self._dtype.type(0)

    @staticmethod
    def _shift(memory: np.ndarray, value) -> None:
        # Drop the oldest sample (last index) and insert value at index 0
        memory[1:] = memory[:-1]
        memory[0] = value

    # ========================================================================
    # Coefficients
    # ========================================================================

    def set_num(self, num: ArrayLike) -> None:
        """
        Replace the numerator coefficients.

        History is kept; the new coefficients act from the next sample on.

        Raises
        ------
        ValidationError
            If num does not have n_num finite elements
        """
        self._num = self._check_num(num, self.n_num)

    def set_den(self, den: ArrayLike) -> None:
        """
        Replace the denominator coefficients, including a[0].

        History is kept; the new coefficients act from the next sample on.

        Raises
        ------
        ValidationError
            If den does not have n_den finite elements or |a[0]| <= atol
        """
        den_arr = self._check_den(den, self.n_den)
        self._den_leading = den_arr[0]
        self._den = den_arr[1:]

    def get_num(self) -> CoefficientVector:
        """Numerator coefficients b (copy)."""
        return self._num.copy()

    def get_den(self) -> CoefficientVector:
        """Denominator coefficients without the leading one, a[1:] (copy)."""
        return self._den.copy()

    def get_den_leading(self) -> ScalarLike:
        """Leading denominator coefficient a[0]; usually normalized to 1."""
        return self._den_leading

    def get_full_den(self) -> CoefficientVector:
        """Full denominator a = [a[0], a[1], ...]."""
        return np.concatenate(([self._den_leading], self._den)).astype(self._dtype)

    def get_output(self) -> ScalarLike:
        """Last computed output, without recomputation (0 before the first sample)."""
        return self._output

    def dc_gain(self) -> float:
        """
        Steady-state gain Σb / Σa.

        For a stable filter, a constant input u converges to dc_gain() * u.

        Raises
        ------
        ValidationError
            If Σa is zero (pole at z = 1, no finite steady state)
        """
        den_sum = self._den_leading + np.sum(self._den)
        if den_sum == 0:
            raise ValidationError("Denominator sums to zero; DC gain is infinite")
        return float(np.sum(self._num) / den_sum)

    def _check_num(self, num: ArrayLike, size: Optional[int]) -> np.ndarray:
        arr = as_vector(num, size, "num", self._dtype)
        check_finite(arr, "num")
        return arr

    def _check_den(self, den: ArrayLike, size: Optional[int]) -> np.ndarray:
        arr = as_vector(den, size, "den", self._dtype)
        check_finite(arr, "den")
        check_leading_coefficient(arr[0], self._atol)
        return arr

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def n_num(self) -> int:
        """Number of numerator coefficients (fixed)."""
        return self._num.shape[0]

    @property
    def n_den(self) -> int:
        """Number of denominator coefficients including a[0] (fixed)."""
        return self._den.shape[0] + 1

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def input_memory(self) -> MemoryVector:
        """Past inputs, index 0 = most recent (copy)."""
        return self._input_memory.copy()

    @property
    def output_memory(self) -> MemoryVector:
        """Past outputs, index 0 = most recent (copy)."""
        return self._output_memory.copy()

    def __repr__(self) -> str:
        return (
            f"DiscreteTransferFunction(num={self._num.tolist()}, "
            f"den={self.get_full_den().tolist()}, dtype={self._dtype})"
        )
