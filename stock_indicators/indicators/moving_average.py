"""
Moving average dispatch.

Every smoothing algorithm is a pure kernel registered against a
``MovingAvgType``. The ``MovingAverageDispatcher`` resolves the input
series, looks the kernel up and runs it. Kernels that smooth their own
intermediate series (DEMA, Hull, T3, ...) recurse through the dispatcher on
explicit arrays, so nested smoothing never mutates the context.

Unknown kinds follow ``UnsupportedMovingAveragePolicy``: by default a
warning is logged and an empty series returned; under ``raise`` an
``UnsupportedMovingAverageError`` is raised.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from stock_indicators.config.settings import get_settings
from stock_indicators.core.data_types import MovingAvgType, UnsupportedMovingAveragePolicy
from stock_indicators.core.exceptions import ConfigurationError, UnsupportedMovingAverageError
from stock_indicators.core.utils import (
    RoundedList,
    calculate_ema_step,
    clamp_length,
    min_or_max,
    pad_to,
    rolling_max_min_pair,
    round_series,
    safe_exp,
    safe_sqrt,
    take_last,
    value_at,
)
from stock_indicators.indicators.context import TimeSeriesContext
from stock_indicators.indicators.resolver import derive_high_low, resolve_input
from stock_indicators.indicators.transforms import standard_deviation
from stock_indicators.monitoring.logger import LogCategory, get_logger

logger = get_logger(__name__, LogCategory.INDICATOR)

MovingAverageKernel = Callable[["SmoothingInput"], np.ndarray]


@dataclass(frozen=True)
class SmoothingInput:
    """Arguments handed to a moving average kernel.

    Attributes:
        values: Series to smooth, aligned to the context count.
        high: High companion of ``values``.
        low: Low companion of ``values``.
        volume: Context volumes.
        length: Primary window length.
        fast_length: Optional fast length; kernels choose their own default.
        slow_length: Optional slow length; kernels choose their own default.
        context: Context the series belongs to.
        dispatcher: Dispatcher used for nested smoothing.
    """

    values: np.ndarray
    high: np.ndarray
    low: np.ndarray
    volume: np.ndarray
    length: int
    fast_length: int | None
    slow_length: int | None
    context: TimeSeriesContext
    dispatcher: "MovingAverageDispatcher"

    def smooth(
        self,
        kind: MovingAvgType,
        values: np.ndarray,
        length: int | None = None,
    ) -> np.ndarray:
        """Smooth an intermediate series with another kernel."""
        result = self.dispatcher.smooth(
            self.context,
            kind,
            values,
            self.length if length is None else length,
        )
        return pad_to(result, len(values))


class MovingAverageRegistry:
    """Mapping from smoothing kind to kernel.

    Registration of a kind that already has a kernel raises
    ``ConfigurationError``. Populated at import time and not synchronized.
    """

    def __init__(self) -> None:
        self._kernels: dict[MovingAvgType, MovingAverageKernel] = {}

    def register(self, kind: MovingAvgType, kernel: MovingAverageKernel) -> None:
        """Register ``kernel`` for ``kind``.

        Raises:
            ConfigurationError: If ``kind`` already has a kernel.
        """
        kind = MovingAvgType(kind)
        if kind in self._kernels:
            raise ConfigurationError(
                f"Moving average '{kind.value}' already registered",
                details={"kind": kind.value},
            )
        self._kernels[kind] = kernel
        logger.trace(f"Registered moving average: {kind.value}")

    def unregister(self, kind: MovingAvgType) -> bool:
        """Remove the kernel for ``kind``; returns whether one existed."""
        return self._kernels.pop(MovingAvgType(kind), None) is not None

    def get(self, kind: MovingAvgType | str) -> MovingAverageKernel | None:
        """Return the kernel for ``kind`` or None for unknown kinds."""
        try:
            kind = MovingAvgType(kind)
        except ValueError:
            return None
        return self._kernels.get(kind)

    def kinds(self) -> list[MovingAvgType]:
        return list(self._kernels)

    def __contains__(self, kind: object) -> bool:
        return self.get(kind) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._kernels)


registry = MovingAverageRegistry()


def register_moving_average(
    kind: MovingAvgType,
    target: MovingAverageRegistry | None = None,
) -> Callable[[MovingAverageKernel], MovingAverageKernel]:
    """Decorator registering a kernel for ``kind``."""

    def decorator(kernel: MovingAverageKernel) -> MovingAverageKernel:
        (target if target is not None else registry).register(kind, kernel)
        return kernel

    return decorator


class MovingAverageDispatcher:
    """Selects and runs a smoothing kernel by kind."""

    def __init__(
        self,
        kernels: MovingAverageRegistry | None = None,
        policy: UnsupportedMovingAveragePolicy | str | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            kernels: Kernel registry; the module registry when omitted.
            policy: Unsupported-kind policy; read from settings when omitted.
        """
        self.kernels = kernels if kernels is not None else registry
        self._policy = UnsupportedMovingAveragePolicy(policy) if policy is not None else None

    @property
    def policy(self) -> UnsupportedMovingAveragePolicy:
        if self._policy is not None:
            return self._policy
        return get_settings().indicators.unsupported_moving_average

    def supported_kinds(self) -> list[MovingAvgType]:
        return self.kernels.kinds()

    def moving_average(
        self,
        context: TimeSeriesContext,
        kind: MovingAvgType | str,
        length: int,
        series: np.ndarray | list[float] | None = None,
        fast_length: int | None = None,
        slow_length: int | None = None,
    ) -> np.ndarray:
        """Smooth the context's resolved input, or ``series`` when given.

        A supplied ``series`` replaces ``context.custom_values`` before
        dispatch and is smoothed as-is.

        Args:
            context: Context supplying prices and pipeline state.
            kind: Smoothing algorithm.
            length: Primary window length.
            series: Optional explicit series to smooth.
            fast_length: Optional fast length for adaptive kinds.
            slow_length: Optional slow length for adaptive kinds.

        Returns:
            Smoothed series of ``context.count`` values, or an empty array
            for an unsupported kind under the silent policy.

        Raises:
            UnsupportedMovingAverageError: For an unsupported kind under
                the ``raise`` policy.
            ScalarInputRequiredError: If no series is given and the context
                cannot be chained from.
        """
        if series is not None:
            context.custom_values = round_series(series)
            values = pad_to(context.custom_values, context.count)
            high, low = derive_high_low(values, context)
        else:
            resolved = resolve_input(context)
            values, high, low = resolved.values, resolved.high, resolved.low
        return self._dispatch(context, kind, values, high, low, length, fast_length, slow_length)

    def smooth(
        self,
        context: TimeSeriesContext,
        kind: MovingAvgType | str,
        values: np.ndarray,
        length: int,
        fast_length: int | None = None,
        slow_length: int | None = None,
    ) -> np.ndarray:
        """Smooth an explicit series without touching the context state."""
        values = pad_to(round_series(values), context.count)
        high, low = derive_high_low(values, context)
        return self._dispatch(context, kind, values, high, low, length, fast_length, slow_length)

    def _dispatch(
        self,
        context: TimeSeriesContext,
        kind: MovingAvgType | str,
        values: np.ndarray,
        high: np.ndarray,
        low: np.ndarray,
        length: int,
        fast_length: int | None,
        slow_length: int | None,
    ) -> np.ndarray:
        kernel = self.kernels.get(kind)
        if kernel is None:
            return self._unsupported(kind)

        inputs = SmoothingInput(
            values=values,
            high=high,
            low=low,
            volume=pad_to(context.volumes, context.count),
            length=max(int(length), 1),
            fast_length=fast_length,
            slow_length=slow_length,
            context=context,
            dispatcher=self,
        )
        return round_series(kernel(inputs))

    def _unsupported(self, kind: Any) -> np.ndarray:
        name = getattr(kind, "value", kind)
        if self.policy == UnsupportedMovingAveragePolicy.RAISE:
            raise UnsupportedMovingAverageError(
                f"Moving average {name} is not supported",
                kind=kind,
            )
        logger.warning(
            f"Moving average {name} is not supported; returning an empty series",
            extra={"extra_data": {"kind": str(name)}},
        )
        return np.zeros(0)


default_dispatcher = MovingAverageDispatcher()


def get_moving_average(
    context: TimeSeriesContext,
    kind: MovingAvgType | str,
    length: int,
    series: np.ndarray | list[float] | None = None,
    fast_length: int | None = None,
    slow_length: int | None = None,
) -> np.ndarray:
    """Smooth with the module-level dispatcher."""
    return default_dispatcher.moving_average(
        context, kind, length, series=series, fast_length=fast_length, slow_length=slow_length
    )


# =============================================================================
# Basic Kernels
# =============================================================================


@register_moving_average(MovingAvgType.SIMPLE)
def simple_moving_average(inp: SmoothingInput) -> np.ndarray:
    """Mean of the last ``length`` values; shorter windows at the start."""
    buffer = RoundedList()
    sma = RoundedList()
    for value in inp.values:
        buffer.append(value)
        recent = take_last(buffer, inp.length)
        sma.append(sum(recent) / len(recent))
    return sma.to_array()


@register_moving_average(MovingAvgType.EXPONENTIAL)
def exponential_moving_average(inp: SmoothingInput) -> np.ndarray:
    """Exponential recurrence seeded from zero."""
    ema = RoundedList()
    for value in inp.values:
        ema.append(calculate_ema_step(value, ema.last(), inp.length))
    return ema.to_array()


@register_moving_average(MovingAvgType.WEIGHTED)
def weighted_moving_average(inp: SmoothingInput) -> np.ndarray:
    """Linearly weighted mean; missing history counts as zero."""
    length = inp.length
    weights = np.arange(length, 0, -1, dtype=np.float64)
    weight_total = weights.sum()
    wma = RoundedList()
    for i in range(len(inp.values)):
        window = inp.values[max(0, i - length + 1): i + 1][::-1]
        total = float(np.dot(window, weights[: len(window)]))
        wma.append(total / weight_total if weight_total != 0 else 0.0)
    return wma.to_array()


@register_moving_average(MovingAvgType.WILDERS_SMOOTHING)
def wilders_moving_average(inp: SmoothingInput) -> np.ndarray:
    """Exponential recurrence with ``k = 1 / length``."""
    k = 1 / inp.length
    wwma = RoundedList()
    for value in inp.values:
        wwma.append(value * k + wwma.last() * (1 - k))
    return wwma.to_array()


# =============================================================================
# Compound Kernels
# =============================================================================


@register_moving_average(MovingAvgType.DOUBLE_EXPONENTIAL)
def double_exponential_moving_average(inp: SmoothingInput) -> np.ndarray:
    ema1 = inp.smooth(MovingAvgType.EXPONENTIAL, inp.values)
    ema2 = inp.smooth(MovingAvgType.EXPONENTIAL, ema1)
    return 2 * ema1 - ema2


@register_moving_average(MovingAvgType.TRIPLE_EXPONENTIAL)
def triple_exponential_moving_average(inp: SmoothingInput) -> np.ndarray:
    ema1 = inp.smooth(MovingAvgType.EXPONENTIAL, inp.values)
    ema2 = inp.smooth(MovingAvgType.EXPONENTIAL, ema1)
    ema3 = inp.smooth(MovingAvgType.EXPONENTIAL, ema2)
    return 3 * ema1 - 3 * ema2 + ema3


@register_moving_average(MovingAvgType.TRIANGULAR)
def triangular_moving_average(inp: SmoothingInput) -> np.ndarray:
    sma1 = inp.smooth(MovingAvgType.SIMPLE, inp.values)
    return inp.smooth(MovingAvgType.SIMPLE, sma1)


@register_moving_average(MovingAvgType.HULL)
def hull_moving_average(inp: SmoothingInput) -> np.ndarray:
    """WMA of ``2 * WMA(length / 2) - WMA(length)`` over ``sqrt(length)``."""
    half_length = clamp_length(math.ceil(inp.length / 2))
    sqrt_length = clamp_length(math.ceil(safe_sqrt(inp.length)))
    wma_full = inp.smooth(MovingAvgType.WEIGHTED, inp.values, inp.length)
    wma_half = inp.smooth(MovingAvgType.WEIGHTED, inp.values, half_length)
    return inp.smooth(MovingAvgType.WEIGHTED, 2 * wma_half - wma_full, sqrt_length)


@register_moving_average(MovingAvgType.ZERO_LAG_EXPONENTIAL)
def zero_lag_exponential_moving_average(inp: SmoothingInput) -> np.ndarray:
    ema1 = inp.smooth(MovingAvgType.EXPONENTIAL, inp.values)
    ema2 = inp.smooth(MovingAvgType.EXPONENTIAL, ema1)
    return ema1 + (ema1 - ema2)


@register_moving_average(MovingAvgType.MCNICHOLL)
def mcnicholl_moving_average(inp: SmoothingInput) -> np.ndarray:
    alpha = 2 / (inp.length + 1)
    ema1 = inp.smooth(MovingAvgType.EXPONENTIAL, inp.values)
    ema2 = inp.smooth(MovingAvgType.EXPONENTIAL, ema1)
    if 1 - alpha == 0:
        return np.zeros(len(inp.values))
    return ((2 - alpha) * ema1 - ema2) / (1 - alpha)


@register_moving_average(MovingAvgType.TILLSON_T3)
def tillson_t3_moving_average(inp: SmoothingInput, v_factor: float = 0.7) -> np.ndarray:
    """Tillson T3: weighted blend of the 3rd through 6th chained EMAs."""
    c1 = -v_factor ** 3
    c2 = 3 * v_factor ** 2 + 3 * v_factor ** 3
    c3 = -6 * v_factor ** 2 - 3 * v_factor - 3 * v_factor ** 3
    c4 = 1 + 3 * v_factor + v_factor ** 3 + 3 * v_factor ** 2

    emas = []
    series = inp.values
    for _ in range(6):
        series = inp.smooth(MovingAvgType.EXPONENTIAL, series)
        emas.append(series)
    return c1 * emas[5] + c2 * emas[4] + c3 * emas[3] + c4 * emas[2]


@register_moving_average(MovingAvgType.LEAST_SQUARES)
def least_squares_moving_average(inp: SmoothingInput) -> np.ndarray:
    wma = inp.smooth(MovingAvgType.WEIGHTED, inp.values)
    sma = inp.smooth(MovingAvgType.SIMPLE, inp.values)
    return 3 * wma - 2 * sma


# =============================================================================
# Adaptive Kernels
# =============================================================================


@register_moving_average(MovingAvgType.KAUFMAN_ADAPTIVE)
def kaufman_adaptive_moving_average(inp: SmoothingInput) -> np.ndarray:
    """KAMA: smoothing constant scaled by the efficiency ratio.

    Fast and slow lengths default to 2 and 30.
    """
    length = inp.length
    fast_alpha = 2 / ((inp.fast_length or 2) + 1)
    slow_alpha = 2 / ((inp.slow_length or 30) + 1)

    changes: list[float] = []
    kama = RoundedList()
    values = inp.values
    for i, value in enumerate(values):
        prev_value = value_at(values, i - 1)
        prior_value = values[i - length] if i >= length else 0.0
        changes.append(abs(value - prev_value))

        change_sum = sum(take_last(changes, length))
        efficiency_ratio = abs(value - prior_value) / change_sum if change_sum != 0 else 0.0

        sc = (efficiency_ratio * (fast_alpha - slow_alpha) + slow_alpha) ** 2
        kama.append(sc * value + (1 - sc) * kama.last())
    return kama.to_array()


@register_moving_average(MovingAvgType.ADAPTIVE)
def adaptive_moving_average(inp: SmoothingInput) -> np.ndarray:
    """AMA: step size driven by where price sits in its recent range.

    Fast length defaults to 2 and slow length to ``length``.
    """
    fast_alpha = 2 / ((inp.fast_length or 2) + 1)
    slow_alpha = 2 / ((inp.slow_length or inp.length) + 1)
    highest, lowest = rolling_max_min_pair(inp.high, inp.low, inp.length + 1)

    ama = RoundedList()
    for i, value in enumerate(inp.values):
        hh = value_at(highest, i)
        ll = value_at(lowest, i)
        span = hh - ll
        multiplier = min_or_max(abs(2 * value - ll - hh) / span, 1, 0) if span != 0 else 0.0
        ssc = multiplier * (fast_alpha - slow_alpha) + slow_alpha

        prev_ama = ama.last()
        ama.append(prev_ama + ssc ** 2 * (value - prev_ama))
    return ama.to_array()


@register_moving_average(MovingAvgType.VARIABLE_LENGTH)
def variable_length_moving_average(inp: SmoothingInput) -> np.ndarray:
    """VLMA: EMA whose length grows inside the mean band and shrinks outside it.

    Minimum length defaults to 5 and maximum length to ``length``.
    """
    min_length = inp.fast_length or 5
    max_length = inp.slow_length or inp.length
    values = inp.values

    sma = inp.smooth(MovingAvgType.SIMPLE, values, max_length)
    std_dev, _ = standard_deviation(values, sma, max_length)

    lengths: list[float] = []
    vlma = RoundedList()
    for i, value in enumerate(values):
        a = sma[i] - 1.75 * std_dev[i]
        b = sma[i] - 0.25 * std_dev[i]
        c = sma[i] + 0.25 * std_dev[i]
        d = sma[i] + 1.75 * std_dev[i]

        prev_length = lengths[-1] if lengths else float(max_length)
        if b <= value <= c:
            length = prev_length + 1
        elif value < a or value > d:
            length = prev_length - 1
        else:
            length = prev_length
        length = min_or_max(length, max_length, min_length)
        lengths.append(length)

        sc = 2 / (length + 1)
        prev_vlma = vlma[-1] if vlma else value
        vlma.append(value * sc + (1 - sc) * prev_vlma)
    return vlma.to_array()


@register_moving_average(MovingAvgType.MESA_ADAPTIVE)
def mesa_adaptive_moving_average(
    inp: SmoothingInput,
    fast_alpha: float = 0.5,
    slow_alpha: float = 0.05,
) -> np.ndarray:
    """Ehlers MAMA: alpha driven by the Hilbert-transform phase rate."""
    values = inp.values
    n = len(values)
    smooth = np.zeros(n)
    detrender = np.zeros(n)
    q1 = np.zeros(n)
    i1 = np.zeros(n)
    i2 = np.zeros(n)
    q2 = np.zeros(n)
    re = np.zeros(n)
    im = np.zeros(n)
    period = np.zeros(n)
    phase = np.zeros(n)
    mama = RoundedList()

    def hilbert(series: np.ndarray, i: int, prev_period: float) -> float:
        return (
            0.0962 * series[i]
            + 0.5769 * value_at(series, i - 2)
            - 0.5769 * value_at(series, i - 4)
            - 0.0962 * value_at(series, i - 6)
        ) * (0.075 * prev_period + 0.54)

    for i in range(n):
        prev_period = value_at(period, i - 1)
        smooth[i] = (
            4 * values[i]
            + 3 * value_at(values, i - 1)
            + 2 * value_at(values, i - 2)
            + value_at(values, i - 3)
        ) / 10
        detrender[i] = hilbert(smooth, i, prev_period)
        q1[i] = hilbert(detrender, i, prev_period)
        i1[i] = value_at(detrender, i - 3)
        j_i = hilbert(i1, i, prev_period)
        j_q = hilbert(q1, i, prev_period)

        prev_i2 = value_at(i2, i - 1)
        prev_q2 = value_at(q2, i - 1)
        i2[i] = 0.2 * (i1[i] - j_q) + 0.8 * prev_i2
        q2[i] = 0.2 * (q1[i] + j_i) + 0.8 * prev_q2
        re[i] = 0.2 * (i2[i] * prev_i2 + q2[i] * prev_q2) + 0.8 * value_at(re, i - 1)
        im[i] = 0.2 * (i2[i] * prev_q2 - q2[i] * prev_i2) + 0.8 * value_at(im, i - 1)

        atan = math.atan(im[i] / re[i]) if re[i] != 0 else 0.0
        raw_period = 2 * math.pi / atan if atan != 0 else 0.0
        raw_period = min_or_max(raw_period, 1.5 * prev_period, 0.67 * prev_period)
        raw_period = min_or_max(raw_period, 50, 6)
        period[i] = 0.2 * raw_period + 0.8 * prev_period

        phase[i] = math.degrees(math.atan(q1[i] / i1[i])) if i1[i] != 0 else 0.0
        delta_phase = max(value_at(phase, i - 1) - phase[i], 1.0)
        alpha = max(fast_alpha / delta_phase, slow_alpha)

        mama.append(alpha * values[i] + (1 - alpha) * mama.last())
    return mama.to_array()


# =============================================================================
# Weighted and Regression Kernels
# =============================================================================


@register_moving_average(MovingAvgType.END_POINT_WEIGHTED)
def end_point_moving_average(inp: SmoothingInput) -> np.ndarray:
    """Weights ``-j`` for the value ``j`` bars back; the newest bar weighs zero."""
    length = inp.length
    weights = -np.arange(length, dtype=np.float64)
    weight_total = weights.sum()
    epma = RoundedList()
    for i in range(len(inp.values)):
        window = inp.values[max(0, i - length + 1): i + 1][::-1]
        total = float(np.dot(window, weights[: len(window)]))
        epma.append(total / weight_total if weight_total != 0 else 0.0)
    return epma.to_array()


@register_moving_average(MovingAvgType.LINEAR_REGRESSION)
def linear_regression(inp: SmoothingInput) -> np.ndarray:
    """Least-squares line over the trailing window, evaluated at the current bar."""
    values = inp.values
    predicted = RoundedList()
    for i in range(len(values)):
        start = max(0, i - inp.length + 1)
        ys = values[start: i + 1]
        xs = np.arange(start, i + 1, dtype=np.float64)
        n = len(ys)

        sum_x = xs.sum()
        sum_y = ys.sum()
        sum_xy = float(np.dot(xs, ys))
        sum_x2 = float(np.dot(xs, xs))
        bottom = n * sum_x2 - sum_x ** 2
        slope = (n * sum_xy - sum_x * sum_y) / bottom if bottom != 0 else 0.0
        intercept = (sum_y - slope * sum_x) / n
        predicted.append(intercept + slope * i)
    return predicted.to_array()


@register_moving_average(MovingAvgType.ARNAUD_LEGOUX)
def arnaud_legoux_moving_average(
    inp: SmoothingInput,
    offset: float = 0.85,
    sigma: float = 6,
) -> np.ndarray:
    """ALMA: Gaussian weights centred at ``offset`` of the window."""
    length = inp.length
    m = offset * (length - 1)
    s = length / sigma
    weights = np.array(
        [safe_exp(-((j - m) ** 2) / (2 * s ** 2)) if s != 0 else 0.0 for j in range(length)]
    )
    weight_total = weights.sum()

    values = inp.values
    alma = RoundedList()
    for i in range(len(values)):
        total = sum(value_at(values, i - (length - 1 - j)) * weights[j] for j in range(length))
        alma.append(total / weight_total if weight_total != 0 else 0.0)
    return alma.to_array()


@register_moving_average(MovingAvgType.AHRENS)
def ahrens_moving_average(inp: SmoothingInput) -> np.ndarray:
    length = inp.length
    ahma = RoundedList()
    for i, value in enumerate(inp.values):
        prior = ahma[i - length] if i >= length else value
        prev = ahma.last()
        ahma.append(prev + (value - (prev + prior) / 2) / length)
    return ahma.to_array()


# =============================================================================
# Volume Kernels
# =============================================================================


@register_moving_average(MovingAvgType.VOLUME_WEIGHTED)
def volume_weighted_moving_average(inp: SmoothingInput) -> np.ndarray:
    """SMA of price times volume divided by SMA of volume."""
    volume_sma = inp.smooth(MovingAvgType.SIMPLE, inp.volume)
    volume_price: list[float] = []
    vwma = RoundedList()
    for value, volume, avg_volume in zip(inp.values, inp.volume, volume_sma):
        volume_price.append(value * volume)
        recent = take_last(volume_price, inp.length)
        volume_price_sma = sum(recent) / len(recent)
        vwma.append(volume_price_sma / avg_volume if avg_volume != 0 else 0.0)
    return vwma.to_array()


@register_moving_average(MovingAvgType.VOLUME_WEIGHTED_AVERAGE_PRICE)
def volume_weighted_average_price(inp: SmoothingInput) -> np.ndarray:
    """Cumulative volume-weighted mean of the series; ignores ``length``."""
    volume_price_sum = 0.0
    volume_sum = 0.0
    vwap = RoundedList()
    for value, volume in zip(inp.values, inp.volume):
        volume_price_sum += value * volume
        volume_sum += volume
        vwap.append(volume_price_sum / volume_sum if volume_sum != 0 else 0.0)
    return vwap.to_array()
