"""
Shared numeric utilities for the indicator library.

Provides common functions for:
- Four-decimal rounding of every stored value
- Guarded math primitives (sqrt, log, exp, pow)
- Look-back helpers that treat missing history as zero
- Rolling highest/lowest buffers
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable, Sequence

import numpy as np

DECIMALS = 4

# Floats at or beyond this magnitude carry no fractional digits to round
_ROUNDING_LIMIT = 1e15

# Bounds applied to derived integer lengths (Hull half-length, sqrt-length)
MIN_LENGTH = 2
MAX_LENGTH = 530


# =============================================================================
# Rounding
# =============================================================================


def round_value(value: float, decimals: int = DECIMALS) -> float:
    """Round a scalar to the library precision.

    Rounds the shortest decimal representation of ``value`` half to even,
    so 0.00015 becomes 0.0002 and 0.00305 becomes 0.003. Non-finite and
    very large values are returned unchanged.

    Args:
        value: Value to round.
        decimals: Number of decimal places.

    Returns:
        Rounded float.
    """
    value = float(value)
    if not math.isfinite(value) or abs(value) >= _ROUNDING_LIMIT:
        return value
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_EVEN))


def round_series(values: Iterable[float], decimals: int = DECIMALS) -> np.ndarray:
    """Round a whole series to the library precision.

    Args:
        values: Any iterable of numbers.
        decimals: Number of decimal places.

    Returns:
        Rounded float64 array.
    """
    if not isinstance(values, (np.ndarray, list, tuple)):
        values = list(values)
    array = np.asarray(values, dtype=np.float64)
    rounded = np.fromiter(
        (round_value(v, decimals) for v in array.ravel()), dtype=np.float64, count=array.size
    )
    return rounded.reshape(array.shape)


class RoundedList(list):
    """List whose ``append`` rounds each value before storing it."""

    def append(self, value: float) -> None:  # type: ignore[override]
        super().append(round_value(value))

    def last(self, default: float = 0.0) -> float:
        """Return the most recent value or ``default`` when empty."""
        return self[-1] if self else default

    def to_array(self) -> np.ndarray:
        return np.asarray(self, dtype=np.float64)


# =============================================================================
# Math Primitives
# =============================================================================


def min_or_max(value: float, max_value: float, min_value: float) -> float:
    """Clamp ``value`` into ``[min_value, max_value]``."""
    return min(max(value, min_value), max_value)


def clamp_length(value: float, max_value: int = MAX_LENGTH, min_value: int = MIN_LENGTH) -> int:
    """Clamp a derived window length to the supported integer range."""
    return int(min(max(int(value), min_value), max_value))


def safe_sqrt(value: float) -> float:
    """Square root that returns 0 for negative input."""
    return math.sqrt(value) if value >= 0 else 0.0


def safe_log(value: float) -> float:
    """Natural log that returns 0 for non-positive input."""
    return math.log(value) if value > 0 else 0.0


def safe_exp(value: float) -> float:
    """Exponential with the argument capped at 100."""
    return math.exp(min(100.0, value))


def safe_pow(value: float, power: float) -> float:
    """Power that saturates instead of overflowing.

    Args:
        value: Base.
        power: Exponent.

    Returns:
        ``value ** power``, the largest float on overflow, or 0 when the
        result is complex or undefined.
    """
    try:
        result = math.pow(value, power)
    except OverflowError:
        return float(np.finfo(np.float64).max)
    except ValueError:
        return 0.0
    return result


def true_range(current_high: float, current_low: float, prev_close: float) -> float:
    """Greatest of high-low and both gaps against the previous close."""
    return max(
        current_high - current_low,
        abs(current_high - prev_close),
        abs(current_low - prev_close),
    )


def percent_change(current_value: float, previous_value: float) -> float:
    """Percent change relative to the magnitude of the previous value."""
    if previous_value == 0:
        return 0.0
    return (current_value - previous_value) / abs(previous_value) * 100


def rescale_value(
    value: float,
    old_max: float,
    old_min: float,
    new_max: float,
    new_min: float,
    is_reversed: bool = False,
) -> float:
    """Map ``value`` from one range onto another.

    Args:
        value: Value in the old range.
        old_max: Upper bound of the old range.
        old_min: Lower bound of the old range.
        new_max: Upper bound of the new range.
        new_min: Lower bound of the new range.
        is_reversed: Measure distance from ``old_max`` instead of ``old_min``.

    Returns:
        Rescaled value, or ``new_min`` for a degenerate old range.
    """
    distance = (old_max - value) if is_reversed else (value - old_min)
    span = old_max - old_min
    ratio = distance / span if span != 0 else 0.0
    return ratio * (new_max - new_min) + new_min


def calculate_ema_step(current_value: float, prev_ema: float, length: int = 14) -> float:
    """One step of the exponential recurrence.

    The smoothing factor ``2 / (length + 1)`` is clamped to ``[0.01, 0.99]``.
    """
    k = min_or_max(2 / (length + 1), 0.99, 0.01)
    return current_value * k + prev_ema * (1 - k)


# =============================================================================
# Look-back Helpers
# =============================================================================


def value_at(values: Sequence[float], index: int) -> float:
    """Return ``values[index]`` or 0 when the index is out of range."""
    if 0 <= index < len(values):
        return float(values[index])
    return 0.0


def min_past_values(index: int, min_index: int, value: float) -> float:
    """Return ``value`` once ``index`` reaches ``min_index``, else 0."""
    return value if index >= min_index else 0.0


def take_last(values: Sequence[float], count: int) -> Sequence[float]:
    """Return up to the last ``count`` items."""
    if count <= 0:
        return values[:0]
    return values[-count:]


def pad_to(values: Sequence[float] | np.ndarray, count: int) -> np.ndarray:
    """Align a series to ``count`` entries.

    Longer series are truncated and shorter ones are right-padded with
    zeros, which is how missing history is treated everywhere.
    """
    arr = np.asarray(values, dtype=np.float64)
    if len(arr) >= count:
        return arr[:count].copy()
    return np.concatenate([arr, np.zeros(count - len(arr), dtype=np.float64)])


def rolling_max_min(values: Sequence[float], length: int = 0) -> tuple[np.ndarray, np.ndarray]:
    """Rolling highest and lowest of a single series.

    The window is ``max(length, 2)`` and expands over the first bars.

    Args:
        values: Input series.
        length: Requested window length.

    Returns:
        Tuple of (highest, lowest) arrays, both rounded.
    """
    window = max(length, 2)
    buffer = RoundedList()
    highest = RoundedList()
    lowest = RoundedList()
    for value in values:
        buffer.append(value)
        recent = take_last(buffer, window)
        highest.append(max(recent))
        lowest.append(min(recent))
    return highest.to_array(), lowest.to_array()


def rolling_max_min_pair(
    high_values: Sequence[float],
    low_values: Sequence[float],
    length: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Rolling highest of ``high_values`` and lowest of ``low_values``.

    Mismatched inputs produce empty outputs.
    """
    if len(high_values) != len(low_values):
        return np.zeros(0), np.zeros(0)

    window = max(length, 1)
    high_buffer = RoundedList()
    low_buffer = RoundedList()
    highest = RoundedList()
    lowest = RoundedList()
    for high, low in zip(high_values, low_values):
        high_buffer.append(high)
        low_buffer.append(low)
        highest.append(max(take_last(high_buffer, window)))
        lowest.append(min(take_last(low_buffer, window)))
    return highest.to_array(), lowest.to_array()
