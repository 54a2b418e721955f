"""
Enums and pydantic models shared across the indicator library.

Defines the categorical signal, the closed set of smoothing kinds, the
named input series, the indicator name stamp and the bar record used to
build a time series context.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Signal(str, Enum):
    """Per-bar trade indication."""

    NONE = "NONE"
    BUY = "BUY"
    SELL = "SELL"
    STRONG_BUY = "STRONG_BUY"
    STRONG_SELL = "STRONG_SELL"

    @property
    def is_bullish(self) -> bool:
        return self in (Signal.BUY, Signal.STRONG_BUY)

    @property
    def is_bearish(self) -> bool:
        return self in (Signal.SELL, Signal.STRONG_SELL)


class MovingAvgType(str, Enum):
    """Smoothing algorithms selectable wherever a moving average is needed."""

    SIMPLE = "SIMPLE"
    EXPONENTIAL = "EXPONENTIAL"
    WEIGHTED = "WEIGHTED"
    WILDERS_SMOOTHING = "WILDERS_SMOOTHING"
    DOUBLE_EXPONENTIAL = "DOUBLE_EXPONENTIAL"
    TRIPLE_EXPONENTIAL = "TRIPLE_EXPONENTIAL"
    TRIANGULAR = "TRIANGULAR"
    HULL = "HULL"
    ZERO_LAG_EXPONENTIAL = "ZERO_LAG_EXPONENTIAL"
    MCNICHOLL = "MCNICHOLL"
    TILLSON_T3 = "TILLSON_T3"
    KAUFMAN_ADAPTIVE = "KAUFMAN_ADAPTIVE"
    ADAPTIVE = "ADAPTIVE"
    END_POINT_WEIGHTED = "END_POINT_WEIGHTED"
    LEAST_SQUARES = "LEAST_SQUARES"
    LINEAR_REGRESSION = "LINEAR_REGRESSION"
    ARNAUD_LEGOUX = "ARNAUD_LEGOUX"
    AHRENS = "AHRENS"
    VOLUME_WEIGHTED = "VOLUME_WEIGHTED"
    VOLUME_WEIGHTED_AVERAGE_PRICE = "VOLUME_WEIGHTED_AVERAGE_PRICE"
    VARIABLE_LENGTH = "VARIABLE_LENGTH"
    MESA_ADAPTIVE = "MESA_ADAPTIVE"


class UnsupportedMovingAveragePolicy(str, Enum):
    """What the dispatcher does when a smoothing kind has no algorithm."""

    SILENT_EMPTY = "silent_empty"
    RAISE = "raise"


class InputName(str, Enum):
    """Base series an indicator reads when no chained output is present."""

    CLOSE = "CLOSE"
    ADJUSTED_CLOSE = "ADJUSTED_CLOSE"
    OPEN = "OPEN"
    HIGH = "HIGH"
    LOW = "LOW"
    VOLUME = "VOLUME"
    TYPICAL_PRICE = "TYPICAL_PRICE"
    FULL_TYPICAL_PRICE = "FULL_TYPICAL_PRICE"
    MEDIAN_PRICE = "MEDIAN_PRICE"
    WEIGHTED_CLOSE = "WEIGHTED_CLOSE"
    AVERAGE_PRICE = "AVERAGE_PRICE"
    MIDPOINT = "MIDPOINT"
    MIDPRICE = "MIDPRICE"


class IndicatorName(str, Enum):
    """Stamp recording which computation last wrote to a context."""

    NONE = "NONE"
    MOVING_AVERAGE = "MOVING_AVERAGE"
    SIMPLE_MOVING_AVERAGE = "SIMPLE_MOVING_AVERAGE"
    EXPONENTIAL_MOVING_AVERAGE = "EXPONENTIAL_MOVING_AVERAGE"
    WEIGHTED_MOVING_AVERAGE = "WEIGHTED_MOVING_AVERAGE"
    WELLES_WILDER_MOVING_AVERAGE = "WELLES_WILDER_MOVING_AVERAGE"
    RELATIVE_STRENGTH_INDEX = "RELATIVE_STRENGTH_INDEX"
    MOVING_AVERAGE_CONVERGENCE_DIVERGENCE = "MOVING_AVERAGE_CONVERGENCE_DIVERGENCE"
    STANDARD_DEVIATION_VOLATILITY = "STANDARD_DEVIATION_VOLATILITY"
    HISTORICAL_VOLATILITY = "HISTORICAL_VOLATILITY"
    BOLLINGER_BANDS = "BOLLINGER_BANDS"
    BOLLINGER_BANDS_PERCENT_B = "BOLLINGER_BANDS_PERCENT_B"
    BOLLINGER_BANDS_WIDTH = "BOLLINGER_BANDS_WIDTH"
    AVERAGE_TRUE_RANGE = "AVERAGE_TRUE_RANGE"
    TYPICAL_PRICE = "TYPICAL_PRICE"
    FULL_TYPICAL_PRICE = "FULL_TYPICAL_PRICE"
    MEDIAN_PRICE = "MEDIAN_PRICE"
    AVERAGE_PRICE = "AVERAGE_PRICE"
    WEIGHTED_CLOSE = "WEIGHTED_CLOSE"
    MIDPOINT = "MIDPOINT"
    MIDPRICE = "MIDPRICE"


class TickerBar(BaseModel):
    """Single OHLCV bar used to construct a time series context."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="Bar timestamp")
    open: float = Field(..., description="Open price")
    high: float = Field(..., description="High price")
    low: float = Field(..., description="Low price")
    close: float = Field(..., description="Close price")
    volume: float = Field(default=0.0, ge=0, description="Traded volume")

    @field_validator("open", "high", "low", "close", "volume")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinite values."""
        if v != v or v in (float("inf"), float("-inf")):
            raise ValueError(f"Bar values must be finite, got {v}")
        return v

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with serializable types."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }
