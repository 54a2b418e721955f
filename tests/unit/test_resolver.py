"""
Unit tests for indicators/resolver.py
"""

import numpy as np
import pytest

from stock_indicators.core.data_types import IndicatorName, InputName, Signal
from stock_indicators.core.exceptions import ScalarInputRequiredError
from stock_indicators.indicators.context import IndicatorResult, TimeSeriesContext
from stock_indicators.indicators.resolver import (
    derive_high_low,
    resolve_input,
    resolve_named_input,
    resolve_source,
)


class TestResolveInput:
    """Tests for pipeline input resolution."""

    def test_base_series_by_default(self, sample_context):
        """Test a fresh context resolves to its close prices."""
        resolved = resolve_input(sample_context)
        assert np.array_equal(resolved.values, sample_context.close_prices)
        assert np.array_equal(resolved.high, sample_context.high_prices)
        assert np.array_equal(resolved.low, sample_context.low_prices)
        assert np.array_equal(resolved.open, sample_context.open_prices)

    def test_custom_values_take_priority(self, sample_context):
        """Test the previous canonical output is chained."""
        chained = sample_context.close_prices + 0.25
        sample_context.custom_values = chained
        resolved = resolve_input(sample_context)
        assert np.array_equal(resolved.values, chained)

    def test_signals_without_output_raise(self, sample_context):
        """Test chaining from a multi-output computation fails."""
        sample_context.signals = [Signal.NONE] * sample_context.count
        sample_context.indicator_name = IndicatorName.BOLLINGER_BANDS
        with pytest.raises(ScalarInputRequiredError) as exc_info:
            resolve_input(sample_context)
        assert "BOLLINGER_BANDS" in str(exc_info.value)

    def test_clear_allows_recompute(self, sample_context):
        """Test clearing the scratch state restores the base series."""
        sample_context.signals = [Signal.NONE] * sample_context.count
        sample_context.clear()
        resolved = resolve_input(sample_context)
        assert np.array_equal(resolved.values, sample_context.close_prices)

    def test_short_custom_values_padded(self, sample_context):
        """Test the resolved series always has count entries."""
        sample_context.custom_values = np.array([1.0, 2.0])
        resolved = resolve_input(sample_context)
        assert len(resolved.values) == sample_context.count
        assert resolved.values[-1] == 0.0


class TestNamedInputs:
    """Tests for base series selection."""

    def test_volume(self, sample_context):
        """Test the volume series can be selected."""
        values = resolve_named_input(sample_context, InputName.VOLUME)
        assert np.array_equal(values, sample_context.volumes)

    def test_typical_price(self, sample_context):
        """Test typical price is derived from high, low and close."""
        values = resolve_named_input(sample_context, InputName.TYPICAL_PRICE)
        expected = (
            sample_context.high_prices + sample_context.low_prices + sample_context.close_prices
        ) / 3
        assert np.allclose(values, np.round(expected, 4))

    def test_average_price(self, sample_context):
        """Test average price uses open and close."""
        values = resolve_named_input(sample_context, InputName.AVERAGE_PRICE)
        assert np.allclose(values, sample_context.close_prices - 0.25)

    def test_context_input_name(self, sample_bars):
        """Test the context's input name drives resolution."""
        context = TimeSeriesContext.from_bars(sample_bars, input_name=InputName.HIGH)
        resolved = resolve_input(context)
        assert np.array_equal(resolved.values, context.high_prices)


class TestDeriveHighLow:
    """Tests for the high/low synthesis heuristic."""

    def test_price_series_keeps_real_extremes(self, sample_context):
        """Test a series inside the envelope uses the context high/low."""
        high, low = derive_high_low(sample_context.close_prices, sample_context)
        assert np.array_equal(high, sample_context.high_prices)
        assert np.array_equal(low, sample_context.low_prices)

    def test_volume_series_synthesizes(self, sample_context):
        """Test the volume series gets rolling extremes of itself."""
        high, low = derive_high_low(sample_context.volumes, sample_context)
        volumes = sample_context.volumes
        assert high[1] == max(volumes[0], volumes[1])
        assert low[1] == min(volumes[0], volumes[1])

    def test_out_of_envelope_series_synthesizes(self, sample_context):
        """Test an oscillator-like series gets rolling extremes of itself."""
        series = np.linspace(0, 1, sample_context.count)
        high, low = derive_high_low(series, sample_context)
        assert np.all(high >= series - 1e-9)
        assert np.all(low <= series + 1e-9)
        assert not np.array_equal(high, sample_context.high_prices)


class TestResolveSource:
    """Tests for explicit input resolution."""

    def test_raw_series(self, sample_context):
        """Test a raw series is rounded and aligned."""
        resolved = resolve_source(sample_context, [1 / 3] * 4)
        assert len(resolved.values) == sample_context.count
        assert resolved.values[0] == 0.3333

    def test_result_with_output(self, sample_context):
        """Test a result's canonical output is used."""
        result = IndicatorResult(
            name=IndicatorName.SIMPLE_MOVING_AVERAGE,
            custom_values=sample_context.close_prices * 2,
        )
        resolved = resolve_source(sample_context, result)
        assert np.array_equal(resolved.values, sample_context.close_prices * 2)

    def test_result_without_output_raises(self, sample_context):
        """Test a multi-output result cannot be chained."""
        result = IndicatorResult(name=IndicatorName.BOLLINGER_BANDS)
        with pytest.raises(ScalarInputRequiredError):
            resolve_source(sample_context, result)
