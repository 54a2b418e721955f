"""
Pytest fixtures for the Stock Indicators tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def sample_closes():
    """Short close series with a dip and a steady rally."""
    return [10.0, 11.0, 12.0, 11.0, 10.0, 9.0, 10.0, 11.0, 12.0, 13.0, 14.0]


@pytest.fixture
def sample_bars(sample_closes):
    """TickerBar records built around the sample closes."""
    from datetime import datetime, timedelta

    from stock_indicators.core.data_types import TickerBar

    start = datetime(2024, 1, 2)
    return [
        TickerBar(
            timestamp=start + timedelta(days=i),
            open=close - 0.5,
            high=close + 1.0,
            low=close - 1.0,
            close=close,
            volume=1000.0 + 100 * i,
        )
        for i, close in enumerate(sample_closes)
    ]


@pytest.fixture
def sample_context(sample_bars):
    """Context over the sample bars."""
    from stock_indicators.indicators.context import TimeSeriesContext

    return TimeSeriesContext.from_bars(sample_bars, symbol="TEST")


@pytest.fixture
def sample_ohlcv_df():
    """Random-walk OHLCV frame with four-decimal prices."""
    from datetime import datetime, timedelta

    import numpy as np
    import polars as pl

    n = 120
    rng = np.random.default_rng(42)

    returns = rng.normal(0.0005, 0.02, n)
    close = np.round(100.0 * np.exp(np.cumsum(returns)), 4)
    high = np.round(close * (1 + np.abs(rng.normal(0, 0.01, n))), 4)
    low = np.round(close * (1 - np.abs(rng.normal(0, 0.01, n))), 4)
    open_ = np.round(low + rng.uniform(0, 1, n) * (high - low), 4)
    volume = rng.integers(100000, 1000000, n).astype(float)

    timestamps = [datetime(2024, 1, 1) + timedelta(hours=i) for i in range(n)]

    return pl.DataFrame({
        "timestamp": timestamps,
        "open": open_,
        "high": high,
        "low": low,
        "close": close,
        "volume": volume,
    })


@pytest.fixture
def random_context(sample_ohlcv_df):
    """Context over the random-walk frame."""
    from stock_indicators.indicators.context import TimeSeriesContext

    return TimeSeriesContext.from_frame(sample_ohlcv_df, symbol="RAND")


@pytest.fixture
def silent_dispatcher():
    """Dispatcher that returns empty series for unknown kinds."""
    from stock_indicators.indicators.moving_average import MovingAverageDispatcher

    return MovingAverageDispatcher(policy="silent_empty")


@pytest.fixture
def strict_dispatcher():
    """Dispatcher that raises for unknown kinds."""
    from stock_indicators.indicators.moving_average import MovingAverageDispatcher

    return MovingAverageDispatcher(policy="raise")
