"""
Unit tests for indicators/context.py
"""

import numpy as np
import polars as pl
import pytest

from stock_indicators.core.data_types import IndicatorName, InputName, Signal
from stock_indicators.core.exceptions import DataValidationError
from stock_indicators.indicators.context import (
    IndicatorResult,
    TimeSeriesContext,
    validate_bar_count,
)


class TestValidateBarCount:
    """Tests for validate_bar_count."""

    def test_equal_lengths(self):
        """Test the shared length is returned."""
        assert validate_bar_count([1, 2], [3, 4], [5, 6]) == 2

    def test_mismatch(self):
        """Test disagreeing lengths give None."""
        assert validate_bar_count([1, 2], [3]) is None

    def test_none_entries_skipped(self):
        """Test missing series do not take part in the check."""
        assert validate_bar_count([1, 2, 3], None) == 3
        assert validate_bar_count() == 0


class TestTimeSeriesContext:
    """Tests for TimeSeriesContext construction and state."""

    def test_construction_from_arrays(self, sample_closes):
        """Test arrays are stored as float64 and counted."""
        closes = sample_closes
        context = TimeSeriesContext(closes, closes, closes, closes, [1] * len(closes))
        assert context.count == len(closes)
        assert len(context) == len(closes)
        assert context.close_prices.dtype == np.float64
        assert context.input_name == InputName.CLOSE
        assert context.indicator_name == IndicatorName.NONE
        assert len(context.custom_values) == 0
        assert context.signals == []

    def test_length_mismatch_gives_zero_count(self):
        """Test inconsistent series lengths give a count of zero."""
        context = TimeSeriesContext([1, 2, 3], [1, 2, 3], [1, 2], [1, 2, 3], [1, 2, 3])
        assert context.count == 0

    def test_dates_take_part_in_count(self, sample_bars):
        """Test a timestamp sequence of another length zeroes the count."""
        closes = [b.close for b in sample_bars]
        dates = [b.timestamp for b in sample_bars][:-1]
        context = TimeSeriesContext(closes, closes, closes, closes, closes, dates=dates)
        assert context.count == 0

    def test_construction_paths_match(self, sample_bars):
        """Test bars and parallel arrays produce identical state."""
        from_bars = TimeSeriesContext.from_bars(sample_bars)
        from_arrays = TimeSeriesContext(
            [b.open for b in sample_bars],
            [b.high for b in sample_bars],
            [b.low for b in sample_bars],
            [b.close for b in sample_bars],
            [b.volume for b in sample_bars],
            dates=[b.timestamp for b in sample_bars],
        )
        assert from_bars.count == from_arrays.count
        assert from_bars.dates == from_arrays.dates
        for attr in ("open_prices", "high_prices", "low_prices", "close_prices", "volumes"):
            assert np.array_equal(getattr(from_bars, attr), getattr(from_arrays, attr))

    def test_from_bars_rounds(self):
        """Test bar values are rounded to four decimals."""
        from datetime import datetime

        from stock_indicators.core.data_types import TickerBar

        bar = TickerBar(
            timestamp=datetime(2024, 1, 2),
            open=1.123456,
            high=2.0,
            low=1.0,
            close=1.987654,
            volume=10,
        )
        context = TimeSeriesContext.from_bars([bar])
        assert context.open_prices[0] == 1.1235
        assert context.close_prices[0] == 1.9877
        assert context.bars == [bar]

    def test_from_frame(self, sample_ohlcv_df):
        """Test construction from a polars frame."""
        context = TimeSeriesContext.from_frame(sample_ohlcv_df, symbol="RAND")
        assert context.count == sample_ohlcv_df.height
        assert context.symbol == "RAND"
        assert len(context.dates) == sample_ohlcv_df.height
        assert np.allclose(context.close_prices, sample_ohlcv_df["close"].to_numpy())

    def test_from_frame_missing_column(self):
        """Test a frame without volume is rejected."""
        df = pl.DataFrame({"open": [1.0], "high": [1.0], "low": [1.0], "close": [1.0]})
        with pytest.raises(DataValidationError):
            TimeSeriesContext.from_frame(df)

    def test_bars_rebuilt_from_arrays(self, sample_ohlcv_df):
        """Test bar records are rebuilt when the context came from a frame."""
        context = TimeSeriesContext.from_frame(sample_ohlcv_df)
        bars = context.bars
        assert len(bars) == context.count
        assert bars[0].close == float(context.close_prices[0])

    def test_bars_empty_without_dates(self, sample_closes):
        """Test no bars can be rebuilt without timestamps."""
        closes = sample_closes
        context = TimeSeriesContext(closes, closes, closes, closes, closes)
        assert context.bars == []


class TestPipelineState:
    """Tests for applying results and clearing scratch state."""

    def _result(self, count):
        return IndicatorResult(
            name=IndicatorName.SIMPLE_MOVING_AVERAGE,
            output_values={"Sma": np.arange(count, dtype=float)},
            custom_values=np.arange(count, dtype=float),
            signals=[Signal.BUY] * count,
            params={"length": 3},
        )

    def test_apply(self, sample_context):
        """Test a result overwrites the scratch fields."""
        result = self._result(sample_context.count)
        returned = sample_context.apply(result)
        assert returned is sample_context
        assert sample_context.indicator_name == IndicatorName.SIMPLE_MOVING_AVERAGE
        assert np.array_equal(sample_context.custom_values, result.custom_values)
        assert sample_context.signals == result.signals
        assert sample_context.last_result is result

    def test_clear_keeps_prices(self, sample_context):
        """Test clear empties signals and canonical output only."""
        closes = sample_context.close_prices.copy()
        sample_context.apply(self._result(sample_context.count))
        sample_context.clear()
        assert sample_context.signals == []
        assert len(sample_context.custom_values) == 0
        assert sample_context.last_result is None
        assert "Sma" in sample_context.output_values
        assert np.array_equal(sample_context.close_prices, closes)

    def test_result_accessors(self):
        """Test result lookup and the single-output flag."""
        result = self._result(3)
        assert np.array_equal(result["Sma"], [0.0, 1.0, 2.0])
        assert result.has_single_output
        assert not IndicatorResult(name=IndicatorName.BOLLINGER_BANDS).has_single_output

    def test_to_frame(self, sample_context):
        """Test export of outputs and signals."""
        sample_context.apply(self._result(sample_context.count))
        df = sample_context.to_frame()
        assert df.height == sample_context.count
        assert set(df.columns) == {"timestamp", "Sma", "signal"}
        assert df["signal"][0] == "BUY"

    def test_repr(self, sample_context):
        """Test repr mentions count and stamp."""
        text = repr(sample_context)
        assert "count=11" in text
        assert "indicator=NONE" in text
