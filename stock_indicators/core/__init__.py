"""
Core layer for the indicator library.

Contains enums, the bar model, the exception hierarchy and the rounding and
math primitives used by every indicator.
"""

from .data_types import (
    IndicatorName,
    InputName,
    MovingAvgType,
    Signal,
    TickerBar,
    UnsupportedMovingAveragePolicy,
)
from .exceptions import (
    CalculationError,
    ConfigParseError,
    ConfigurationError,
    DataError,
    DataValidationError,
    IndicatorSystemError,
    InvalidConfigError,
    ScalarInputRequiredError,
    UnsupportedMovingAverageError,
    ValidationError,
)
from .utils import (
    DECIMALS,
    RoundedList,
    round_series,
    round_value,
)

__all__ = [
    # Data types
    "IndicatorName",
    "InputName",
    "MovingAvgType",
    "Signal",
    "TickerBar",
    "UnsupportedMovingAveragePolicy",
    # Exceptions
    "CalculationError",
    "ConfigParseError",
    "ConfigurationError",
    "DataError",
    "DataValidationError",
    "IndicatorSystemError",
    "InvalidConfigError",
    "ScalarInputRequiredError",
    "UnsupportedMovingAverageError",
    "ValidationError",
    # Utilities
    "DECIMALS",
    "RoundedList",
    "round_series",
    "round_value",
]
