"""
Indicator layer.

The time series context, input resolution, moving average dispatch, signal
rules and the chainable indicator classes built on them.
"""

from .context import IndicatorResult, TimeSeriesContext, validate_bar_count
from .moving_average import (
    MovingAverageDispatcher,
    MovingAverageRegistry,
    SmoothingInput,
    default_dispatcher,
    get_moving_average,
    register_moving_average,
    registry,
)
from .resolver import ResolvedInput, resolve_input, resolve_named_input, resolve_source
from .signals import (
    bollinger_bands_signal,
    bullish_bearish_signal,
    compare_signal,
    condition_signal,
    rsi_signal,
    volatility_signal,
)
from .technical import (
    EMA,
    MACD,
    RSI,
    SMA,
    WMA,
    AveragePrice,
    AverageTrueRange,
    BollingerBands,
    BollingerBandsPercentB,
    BollingerBandsWidth,
    FullTypicalPrice,
    HistoricalVolatility,
    MedianPrice,
    Midpoint,
    Midprice,
    MovingAverage,
    StandardDeviationVolatility,
    TechnicalIndicator,
    TypicalPrice,
    WeightedClose,
    WellesWilderMovingAverage,
)

__all__ = [
    # Context
    "IndicatorResult",
    "TimeSeriesContext",
    "validate_bar_count",
    # Resolution
    "ResolvedInput",
    "resolve_input",
    "resolve_named_input",
    "resolve_source",
    # Moving averages
    "MovingAverageDispatcher",
    "MovingAverageRegistry",
    "SmoothingInput",
    "default_dispatcher",
    "get_moving_average",
    "register_moving_average",
    "registry",
    # Signals
    "bollinger_bands_signal",
    "bullish_bearish_signal",
    "compare_signal",
    "condition_signal",
    "rsi_signal",
    "volatility_signal",
    # Indicators
    "TechnicalIndicator",
    "SMA",
    "EMA",
    "WMA",
    "WellesWilderMovingAverage",
    "MovingAverage",
    "RSI",
    "MACD",
    "StandardDeviationVolatility",
    "HistoricalVolatility",
    "AverageTrueRange",
    "BollingerBands",
    "BollingerBandsPercentB",
    "BollingerBandsWidth",
    "TypicalPrice",
    "FullTypicalPrice",
    "MedianPrice",
    "AveragePrice",
    "WeightedClose",
    "Midpoint",
    "Midprice",
]
