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
Unit Tests for DiscreteTransferFunction

Tests cover:
- Identity filter and memory clearing
- Steady-state response against the final-value theorem
- Agreement with scipy.signal.lfilter (memory index convention)
- Coefficient replacement keeping history
- Leading denominator precondition and shape errors
- dtype handling and runtime warnings

Test Structure:
- TestIdentityFilter: b = [1], a = [1]
- TestRecurrence: first and higher order filters
- TestCoefficientSetters: set_num / set_den semantics
- TestErrorHandling: invalid construction and setter calls
"""

import unittest

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from scipy.signal import lfilter

from systemmodels.lti.siso import DiscreteTransferFunction
from systemmodels.utils.validation import ValidationError

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def lowpass():
    """y[k] = 0.7 y[k-1] + 0.2 u[k] + 0.1 u[k-1], unit DC gain."""
    return DiscreteTransferFunction(num=[0.2, 0.1], den=[1.0, -0.7])


@pytest.fixture
def rng():
    return np.random.default_rng(42)


# ============================================================================
# Identity Filter
# ============================================================================


class TestIdentityFilter(unittest.TestCase):
    """Tests for the trivial filter y = u."""

    def setUp(self):
        self.tf = DiscreteTransferFunction(num=[1.0], den=[1.0])
        self.inputs = np.array([0.0, 1.0, -2.5, 3.25, 1e6, -1e-6, 7.0])

    def test_output_equals_input(self):
        """Every output sample equals the input sample exactly"""
        for u in self.inputs:
            self.assertEqual(self.tf(u), u)

    def test_get_output_returns_last_value(self):
        self.tf(3.0)
        self.tf(-4.0)
        self.assertEqual(self.tf.get_output(), -4.0)

    def test_get_output_before_first_sample_is_zero(self):
        self.assertEqual(self.tf.get_output(), 0.0)

    def test_empty_output_memory(self):
        """n_den = 1 leaves no output history"""
        self.assertEqual(self.tf.n_den, 1)
        self.assertEqual(self.tf.output_memory.shape, (0,))
        self.assertEqual(self.tf.get_den().shape, (0,))

    def test_clear_memory_behaves_as_fresh(self):
        """After clear_memory() a filter with history matches a new one"""
        tf = DiscreteTransferFunction(num=[0.5, 0.5], den=[1.0, -0.5])
        first = tf.simulate(self.inputs)
        tf.clear_memory()
        assert_array_equal(tf.input_memory, np.zeros(2))
        assert_array_equal(tf.output_memory, np.zeros(1))
        self.assertEqual(tf.get_output(), 0.0)
        second = tf.simulate(self.inputs)
        assert_array_equal(first, second)


# ============================================================================
# Recurrence
# ============================================================================


class TestRecurrence:
    """Tests for the filter recurrence and memory convention."""

    def test_first_order_hand_computed(self):
        tf = DiscreteTransferFunction(num=[0.5], den=[1.0, -0.5])
        assert tf(1.0) == pytest.approx(0.5)
        assert tf(1.0) == pytest.approx(0.75)
        assert tf(1.0) == pytest.approx(0.875)

    def test_step_response_converges_to_final_value(self, lowpass):
        """Unit step converges to (b0 + b1) / (1 + a1)"""
        b0, b1, a1 = 0.2, 0.1, -0.7
        expected = (b0 + b1) / (1 + a1)

        y = lowpass.simulate(np.ones(300))

        assert_allclose(y[-1], expected, rtol=1e-10)
        assert_allclose(lowpass.dc_gain(), expected, rtol=1e-12)

    def test_step_response_converges_non_unit_gain(self):
        tf = DiscreteTransferFunction(num=[0.4, 0.2], den=[1.0, -0.5])
        y = tf.simulate(np.ones(200))
        assert_allclose(y[-1], 0.6 / 0.5, rtol=1e-10)

    def test_matches_lfilter(self, rng):
        """Index 0 = most recent sample, same convention as lfilter"""
        b = np.array([0.3, 0.2, 0.1])
        a = np.array([2.0, -0.5, 0.1, 0.05])
        u = rng.normal(size=100)

        tf = DiscreteTransferFunction(num=b, den=a)
        y = tf.simulate(u)

        assert_allclose(y, lfilter(b, a, u), rtol=1e-12, atol=1e-14)

    def test_unnormalized_leading_coefficient(self):
        """a[0] divides the output; scaling b and a together is a no-op"""
        tf_norm = DiscreteTransferFunction(num=[0.5], den=[1.0, -0.5])
        tf_scaled = DiscreteTransferFunction(num=[2.0], den=[4.0, -2.0])
        u = np.linspace(-1.0, 1.0, 20)
        assert_allclose(tf_norm.simulate(u), tf_scaled.simulate(u), rtol=1e-12)
        assert tf_scaled.get_den_leading() == 4.0

    def test_memory_layout(self):
        """Most recent sample at index 0 in both buffers"""
        tf = DiscreteTransferFunction(num=[1.0, 0.0, 0.0], den=[1.0, 0.0, 0.0])
        for u in (1.0, 2.0, 3.0):
            tf(u)
        assert_array_equal(tf.input_memory, [3.0, 2.0, 1.0])
        assert_array_equal(tf.output_memory, [3.0, 2.0])

    def test_memory_properties_are_copies(self):
        tf = DiscreteTransferFunction(num=[1.0, 1.0], den=[1.0, 0.5])
        tf(1.0)
        mem = tf.input_memory
        mem[:] = 100.0
        assert_array_equal(tf.input_memory, [1.0, 0.0])

    def test_simulate_continues_from_current_memory(self, lowpass):
        u = np.ones(10)
        full = DiscreteTransferFunction(num=[0.2, 0.1], den=[1.0, -0.7]).simulate(
            np.ones(20)
        )
        lowpass.simulate(u)
        tail = lowpass.simulate(u)
        assert_allclose(tail, full[10:], rtol=1e-12)

    def test_from_order_outputs_zero(self):
        tf = DiscreteTransferFunction.from_order(3, 2)
        assert tf.n_num == 3
        assert tf.n_den == 2
        assert_array_equal(tf.get_full_den(), [1.0, 0.0])
        assert_array_equal(tf.simulate([1.0, 2.0, 3.0]), np.zeros(3))

    def test_float32_dtype(self):
        tf = DiscreteTransferFunction(num=[0.5], den=[1.0, -0.5], dtype=np.float32)
        y = tf(1.0)
        assert isinstance(y, np.float32)
        assert tf.get_num().dtype == np.float32
        assert tf.dtype == np.dtype(np.float32)


# ============================================================================
# Coefficient Setters
# ============================================================================


class TestCoefficientSetters:
    """set_num() and set_den() replace coefficients but keep history."""

    def test_set_den_keeps_history(self):
        tf = DiscreteTransferFunction(num=[1.0], den=[1.0, -0.5])
        outputs = [tf(1.0) for _ in range(3)]
        assert_allclose(outputs, [1.0, 1.5, 1.75])

        tf.set_den([1.0, -0.25])

        # Earlier outputs are untouched
        assert tf.get_output() == pytest.approx(1.75)
        assert_allclose(tf.output_memory, [1.75])
        # New coefficient acts on the stored history: 1 + 0.25 * 1.75
        assert tf(1.0) == pytest.approx(1.4375)

        fresh = DiscreteTransferFunction(num=[1.0], den=[1.0, -0.25])
        assert fresh(1.0) == pytest.approx(1.0)

    def test_set_num_keeps_history(self):
        tf = DiscreteTransferFunction(num=[1.0, 1.0], den=[1.0])
        assert tf(1.0) == pytest.approx(1.0)
        assert tf(2.0) == pytest.approx(3.0)

        tf.set_num([0.0, 1.0])

        # Pure delay now: returns the previous input
        assert tf(5.0) == pytest.approx(2.0)
        assert tf(7.0) == pytest.approx(5.0)

    def test_set_den_leading_coefficient(self):
        tf = DiscreteTransferFunction(num=[1.0], den=[1.0, 0.0])
        tf.set_den([2.0, 0.0])
        assert tf.get_den_leading() == 2.0
        assert_array_equal(tf.get_den(), [0.0])
        assert tf(1.0) == pytest.approx(0.5)

    def test_getters_return_copies(self):
        tf = DiscreteTransferFunction(num=[1.0, 2.0], den=[1.0, 3.0])
        num = tf.get_num()
        num[0] = 99.0
        assert_array_equal(tf.get_num(), [1.0, 2.0])


# ============================================================================
# Error Handling
# ============================================================================


class TestErrorHandling:
    """Invalid coefficients are rejected before they can be used."""

    @pytest.mark.parametrize("leading", [0.0, -0.0, 1e-15, -1e-13])
    def test_near_zero_leading_denominator_rejected(self, leading):
        with pytest.raises(ValidationError, match="Leading denominator"):
            DiscreteTransferFunction(num=[1.0], den=[leading, 1.0])

    def test_set_den_zero_leading_rejected_and_state_kept(self):
        tf = DiscreteTransferFunction(num=[1.0], den=[1.0, -0.5])
        tf(1.0)
        with pytest.raises(ValidationError):
            tf.set_den([0.0, 1.0])
        assert tf.get_den_leading() == 1.0
        assert_array_equal(tf.get_den(), [-0.5])
        assert tf(1.0) == pytest.approx(1.5)

    def test_custom_tolerance(self):
        DiscreteTransferFunction(num=[1.0], den=[1e-4, 1.0])
        with pytest.raises(ValidationError):
            DiscreteTransferFunction(num=[1.0], den=[1e-4, 1.0], atol=1e-3)

    @pytest.mark.parametrize("atol", [-1.0, np.nan, np.inf, "tight"])
    def test_invalid_tolerance_rejected(self, atol):
        """A negative tolerance would let a[0] = 0 through"""
        with pytest.raises(ValidationError, match="atol"):
            DiscreteTransferFunction(num=[1.0], den=[0.0, 1.0], atol=atol)

    def test_zero_tolerance_still_rejects_zero_leading(self):
        DiscreteTransferFunction(num=[1.0], den=[1e-300, 1.0], atol=0.0)
        with pytest.raises(ValidationError, match="Leading denominator"):
            DiscreteTransferFunction(num=[1.0], den=[0.0, 1.0], atol=0.0)

    @pytest.mark.parametrize("u", [[1.0, 2.0], "abc", np.ones((2, 2)), []])
    def test_invalid_sample_rejected(self, u):
        tf = DiscreteTransferFunction(num=[1.0, 0.5], den=[1.0, -0.5])
        tf(1.0)
        with pytest.raises(ValidationError, match="u "):
            tf(u)
        # Rejected samples leave the history untouched
        assert_array_equal(tf.input_memory, [1.0, 0.0])
        assert tf.get_output() == pytest.approx(1.0)

    def test_single_element_sample_accepted(self):
        tf = DiscreteTransferFunction(num=[1.0], den=[1.0])
        assert tf([2.5]) == 2.5
        assert tf(np.array([[3.5]])) == 3.5

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            DiscreteTransferFunction(num=[1.0], den=[0.0])

    @pytest.mark.parametrize(
        "num, den",
        [
            ([], [1.0]),
            ([1.0], []),
            ([np.nan], [1.0]),
            ([1.0], [1.0, np.inf]),
            ([[1.0, 2.0], [3.0, 4.0]], [1.0]),
        ],
    )
    def test_invalid_coefficients_rejected(self, num, den):
        with pytest.raises(ValidationError):
            DiscreteTransferFunction(num=num, den=den)

    def test_setter_length_mismatch(self):
        tf = DiscreteTransferFunction(num=[1.0, 0.5], den=[1.0, 0.5])
        with pytest.raises(ValidationError, match="2 elements"):
            tf.set_num([1.0, 2.0, 3.0])
        with pytest.raises(ValidationError, match="2 elements"):
            tf.set_den([1.0])

    def test_from_order_invalid(self):
        with pytest.raises(ValidationError):
            DiscreteTransferFunction.from_order(0, 1)

    def test_unsupported_dtype(self):
        with pytest.raises(ValidationError, match="Unsupported dtype"):
            DiscreteTransferFunction(num=[1.0], den=[1.0], dtype=np.int32)

    def test_dc_gain_integrator(self):
        integrator = DiscreteTransferFunction(num=[1.0], den=[1.0, -1.0])
        with pytest.raises(ValidationError, match="DC gain"):
            integrator.dc_gain()

    def test_nan_input_warns(self):
        tf = DiscreteTransferFunction(num=[1.0], den=[1.0, -0.5])
        with pytest.warns(RuntimeWarning, match="non-finite"):
            y = tf(np.nan)
        assert np.isnan(y)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
