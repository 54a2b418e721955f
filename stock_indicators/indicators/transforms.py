"""
Pure price transform kernels.

Each function takes explicit arrays and returns a rounded float64 array of
the same length. The indicator classes in ``technical`` wrap these with
signals; the input resolver uses them to build derived base series.
"""

from __future__ import annotations

import numpy as np

from stock_indicators.core.utils import (
    RoundedList,
    round_series,
    rolling_max_min,
    rolling_max_min_pair,
    safe_sqrt,
    take_last,
)


def typical_price(high: np.ndarray, low: np.ndarray, close: np.ndarray) -> np.ndarray:
    """(high + low + close) / 3"""
    return round_series((np.asarray(high) + np.asarray(low) + np.asarray(close)) / 3)


def full_typical_price(
    high: np.ndarray,
    low: np.ndarray,
    close: np.ndarray,
    open_: np.ndarray,
) -> np.ndarray:
    """(high + low + close + open) / 4"""
    return round_series(
        (np.asarray(high) + np.asarray(low) + np.asarray(close) + np.asarray(open_)) / 4
    )


def median_price(high: np.ndarray, low: np.ndarray) -> np.ndarray:
    """(high + low) / 2"""
    return round_series((np.asarray(high) + np.asarray(low)) / 2)


def average_price(open_: np.ndarray, close: np.ndarray) -> np.ndarray:
    """(open + close) / 2"""
    return round_series((np.asarray(open_) + np.asarray(close)) / 2)


def weighted_close(high: np.ndarray, low: np.ndarray, close: np.ndarray) -> np.ndarray:
    """(high + low + 2 * close) / 4"""
    return round_series((np.asarray(high) + np.asarray(low) + 2 * np.asarray(close)) / 4)


def midpoint(values: np.ndarray, length: int = 14) -> np.ndarray:
    """Halfway between the rolling highest and lowest of one series."""
    highest, lowest = rolling_max_min(values, length)
    return round_series((highest + lowest) / 2)


def midprice(high: np.ndarray, low: np.ndarray, length: int = 14) -> np.ndarray:
    """Halfway between the rolling highest high and lowest low."""
    highest, lowest = rolling_max_min_pair(high, low, length)
    return round_series((highest + lowest) / 2)


def standard_deviation(
    values: np.ndarray,
    average: np.ndarray,
    length: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Rolling standard deviation of ``values`` around ``average``.

    Squared deviations are rounded as they are buffered; the variance is
    the mean of the last ``length`` of them.

    Args:
        values: Input series.
        average: Moving average of ``values``, same length.
        length: Look-back window.

    Returns:
        Tuple of (standard deviation, variance) arrays.
    """
    window = max(length, 1)
    squared = RoundedList()
    variance = RoundedList()
    std_dev = RoundedList()
    for value, mean in zip(values, average):
        squared.append((value - mean) ** 2)
        recent = take_last(squared, window)
        var = sum(recent) / len(recent)
        variance.append(var)
        std_dev.append(safe_sqrt(var))
    return std_dev.to_array(), variance.to_array()
