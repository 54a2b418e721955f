"""
Unit tests for core/utils.py
"""

import math

import numpy as np
import pytest

from stock_indicators.core.utils import (
    DECIMALS,
    RoundedList,
    calculate_ema_step,
    clamp_length,
    min_or_max,
    min_past_values,
    pad_to,
    percent_change,
    rescale_value,
    rolling_max_min,
    rolling_max_min_pair,
    round_series,
    round_value,
    safe_exp,
    safe_log,
    safe_pow,
    safe_sqrt,
    take_last,
    true_range,
    value_at,
)


class TestRounding:
    """Tests for the rounding policy."""

    def test_decimals(self):
        """Test library precision is four decimals."""
        assert DECIMALS == 4

    def test_round_value(self):
        """Test scalar rounding to four decimals."""
        assert round_value(1.23456789) == 1.2346
        assert round_value(10 / 3) == 3.3333
        assert isinstance(round_value(np.float64(1.5)), float)

    def test_round_half_even(self):
        """Test ties round to the even neighbour."""
        assert round_value(0.5, 0) == 0.0
        assert round_value(1.5, 0) == 2.0
        assert round_value(2.5, 0) == 2.0

    def test_round_half_even_four_decimals(self):
        """Test ties at the fourth decimal follow the decimal digits."""
        assert round_value(0.00015) == 0.0002
        assert round_value(0.00025) == 0.0002
        assert round_value(0.00305) == 0.003
        assert round_value(-0.00015) == -0.0002
        assert round_value(100.00065) == 100.0006

    def test_round_non_finite(self):
        """Test non-finite values pass through."""
        assert math.isnan(round_value(float("nan")))
        assert round_value(float("inf")) == float("inf")

    def test_round_series_ties(self):
        """Test series rounding uses the same tie rule as scalars."""
        result = round_series(np.array([0.00015, 0.00305, 1.23456789]))
        assert list(result) == [0.0002, 0.003, 1.2346]

    def test_round_series_accepts_generators(self):
        """Test series rounding from any iterable."""
        result = round_series(x / 3 for x in range(4))
        assert np.allclose(result, [0.0, 0.3333, 0.6667, 1.0])
        assert result.dtype == np.float64

    def test_rounded_list_rounds_on_append(self):
        """Test RoundedList stores rounded values."""
        values = RoundedList()
        values.append(2 / 3)
        values.append(1.00004)
        assert list(values) == [0.6667, 1.0]
        assert values.last() == 1.0

    def test_rounded_list_last_default(self):
        """Test last() falls back to the default when empty."""
        assert RoundedList().last() == 0.0
        assert RoundedList().last(default=5.0) == 5.0

    def test_rounded_list_to_array(self):
        """Test conversion to a float64 array."""
        values = RoundedList()
        values.append(1)
        arr = values.to_array()
        assert isinstance(arr, np.ndarray)
        assert arr.dtype == np.float64


class TestMathPrimitives:
    """Tests for the safe math helpers."""

    def test_min_or_max(self):
        """Test clamping into a range."""
        assert min_or_max(5, 1, 0) == 1
        assert min_or_max(-5, 1, 0) == 0
        assert min_or_max(0.5, 1, 0) == 0.5

    def test_clamp_length(self):
        """Test derived lengths stay within the supported range."""
        assert clamp_length(0) == 2
        assert clamp_length(7.9) == 7
        assert clamp_length(10_000) == 530

    def test_safe_sqrt(self):
        """Test negative input gives zero."""
        assert safe_sqrt(9) == 3
        assert safe_sqrt(-1) == 0

    def test_safe_log(self):
        """Test non-positive input gives zero."""
        assert safe_log(math.e) == pytest.approx(1.0)
        assert safe_log(0) == 0
        assert safe_log(-3) == 0

    def test_safe_exp_caps_argument(self):
        """Test the exponent is capped to avoid overflow."""
        assert safe_exp(1000) == math.exp(100)

    def test_safe_pow(self):
        """Test overflow saturates and complex results give zero."""
        assert safe_pow(2, 3) == 8
        assert safe_pow(-8, 0.5) == 0
        assert safe_pow(10, 1000) == np.finfo(np.float64).max

    def test_true_range(self):
        """Test true range picks the widest span."""
        assert true_range(12, 10, 11) == 2
        assert true_range(12, 10, 15) == 5
        assert true_range(12, 10, 7) == 5

    def test_percent_change(self):
        """Test percent change with a zero base."""
        assert percent_change(110, 100) == pytest.approx(10.0)
        assert percent_change(-90, -100) == pytest.approx(10.0)
        assert percent_change(5, 0) == 0

    def test_rescale_value(self):
        """Test mapping between ranges."""
        assert rescale_value(5, 10, 0, 100, 0) == 50
        assert rescale_value(2, 10, 0, 100, 0, is_reversed=True) == 80
        assert rescale_value(5, 1, 1, 100, 0) == 0

    def test_calculate_ema_step(self):
        """Test one EMA step and factor clamping."""
        assert calculate_ema_step(10, 0, 14) == pytest.approx(10 * 2 / 15)
        # length 0 would give k = 2, clamped to 0.99
        assert calculate_ema_step(10, 0, 0) == pytest.approx(9.9)


class TestLookBack:
    """Tests for look-back helpers."""

    def test_value_at(self):
        """Test out-of-range lookups give zero."""
        values = [1.0, 2.0, 3.0]
        assert value_at(values, 1) == 2.0
        assert value_at(values, -1) == 0.0
        assert value_at(values, 3) == 0.0

    def test_min_past_values(self):
        """Test values are masked before the minimum index."""
        assert min_past_values(2, 5, 7.0) == 0
        assert min_past_values(5, 5, 7.0) == 7.0

    def test_take_last(self):
        """Test trailing windows, including short history."""
        assert take_last([1, 2, 3, 4], 2) == [3, 4]
        assert take_last([1, 2], 5) == [1, 2]
        assert take_last([1, 2], 0) == []

    def test_pad_to(self):
        """Test padding and truncation."""
        assert np.array_equal(pad_to([1.0, 2.0], 4), [1.0, 2.0, 0.0, 0.0])
        assert np.array_equal(pad_to([1.0, 2.0, 3.0], 2), [1.0, 2.0])
        assert len(pad_to([], 3)) == 3

    def test_rolling_max_min_minimum_window(self):
        """Test the single-series window is at least two bars."""
        highest, lowest = rolling_max_min([1.0, 5.0, 3.0, 2.0], 0)
        assert np.array_equal(highest, [1.0, 5.0, 5.0, 3.0])
        assert np.array_equal(lowest, [1.0, 1.0, 3.0, 2.0])

    def test_rolling_max_min_pair(self):
        """Test rolling extremes over separate high and low series."""
        highest, lowest = rolling_max_min_pair([3.0, 4.0, 2.0], [1.0, 2.0, 0.5], 2)
        assert np.array_equal(highest, [3.0, 4.0, 4.0])
        assert np.array_equal(lowest, [1.0, 1.0, 0.5])

    def test_rolling_max_min_pair_mismatch(self):
        """Test mismatched inputs give empty outputs."""
        highest, lowest = rolling_max_min_pair([1.0, 2.0], [1.0], 2)
        assert len(highest) == 0
        assert len(lowest) == 0
