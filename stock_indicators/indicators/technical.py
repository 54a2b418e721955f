"""
Technical indicators module.

Implements the chainable indicator set organized by category:
- Moving averages (SMA, EMA, WMA, Wilder's and a generic wrapper over every
  registered smoothing kind)
- Momentum indicators (RSI, MACD)
- Volatility indicators (standard deviation, historical volatility, ATR,
  Bollinger Bands and their %B and width derivatives)
- Price transforms (typical, median, weighted close, midpoint, ...)

Each indicator is configured through its constructor and exposes two entry
points. ``calculate(context, source=None)`` is pure: it returns an
``IndicatorResult`` and leaves the context untouched. ``compute(context,
source=None)`` applies that result to the context and returns it, so calls
can be chained either implicitly through the context or explicitly by
passing a previous result as ``source``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from stock_indicators.config.settings import get_settings
from stock_indicators.core.data_types import IndicatorName, MovingAvgType, Signal
from stock_indicators.core.exceptions import ValidationError
from stock_indicators.core.utils import (
    RoundedList,
    calculate_ema_step,
    min_or_max,
    pad_to,
    true_range,
    value_at,
)
from stock_indicators.indicators import transforms
from stock_indicators.indicators.context import IndicatorResult, TimeSeriesContext
from stock_indicators.indicators.moving_average import (
    MovingAverageDispatcher,
    default_dispatcher,
)
from stock_indicators.indicators.resolver import ResolvedInput, resolve_input, resolve_source
from stock_indicators.indicators.signals import (
    bollinger_bands_signal,
    compare_signal,
    rsi_signal,
    volatility_signal,
)
from stock_indicators.monitoring.logger import log_indicator, trace_series

Source = IndicatorResult | np.ndarray | list[float] | None


def _validate_length(field_name: str, value: int, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < minimum:
        raise ValidationError(
            f"{field_name} must be an integer >= {minimum}, got {value!r}",
            field_name=field_name,
            invalid_value=value,
        )
    return int(value)


def _compare_signals(values: np.ndarray, line: np.ndarray) -> list[Signal]:
    """Compare rule on the distance between a series and a line through it."""
    signals = []
    for i in range(len(values)):
        current = values[i] - value_at(line, i)
        previous = value_at(values, i - 1) - value_at(line, i - 1)
        signals.append(compare_signal(current, previous))
    return signals


def _momentum_signals(values: np.ndarray) -> list[Signal]:
    """Compare rule on the first difference of a series against the one before."""
    signals = []
    for i in range(len(values)):
        prev1 = value_at(values, i - 1)
        prev2 = value_at(values, i - 2)
        signals.append(compare_signal(values[i] - prev1, prev1 - prev2))
    return signals


class TechnicalIndicator(ABC):
    """Abstract base class for technical indicators."""

    def __init__(
        self,
        name: IndicatorName,
        params: dict[str, Any] | None = None,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.name = IndicatorName(name)
        self.params = params or {}
        self.dispatcher = dispatcher or default_dispatcher

    @abstractmethod
    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        """Compute the indicator without mutating ``context``."""
        pass

    def compute(self, context: TimeSeriesContext, source: Source = None) -> TimeSeriesContext:
        """Compute the indicator and write the result into ``context``.

        Args:
            context: Context supplying prices and the previous computation.
            source: Optional explicit input; a previous ``IndicatorResult``
                or a raw series. When omitted the input is resolved from the
                context's pipeline state.

        Returns:
            The same context, for chaining.

        Raises:
            ScalarInputRequiredError: If the input would be a computation
                without a single canonical output.
        """
        result = self.calculate(context, source)
        context.apply(result)

        log_indicator(
            f"Computed {self.name.value} over {context.count} bars",
            indicator=self.name.value,
            symbol=context.symbol,
            count=context.count,
            outputs=list(result.output_values),
        )
        if get_settings().indicators.trace_series:
            for key, values in result.output_values.items():
                trace_series(self.name.value, key, values)
        return context

    def resolve(self, context: TimeSeriesContext, source: Source = None) -> ResolvedInput:
        if source is None:
            return resolve_input(context)
        return resolve_source(context, source)

    def smooth(
        self,
        context: TimeSeriesContext,
        kind: MovingAvgType,
        values: np.ndarray,
        length: int,
        fast_length: int | None = None,
        slow_length: int | None = None,
    ) -> np.ndarray:
        """Smooth ``values`` through the dispatcher, padded to the bar count."""
        smoothed = self.dispatcher.smooth(
            context, kind, values, length, fast_length=fast_length, slow_length=slow_length
        )
        return pad_to(smoothed, context.count)

    def result(
        self,
        output_values: dict[str, Any],
        signals: list[Signal],
        custom_values: Any = None,
    ) -> IndicatorResult:
        return IndicatorResult(
            name=self.name,
            output_values={k: np.asarray(v, dtype=np.float64) for k, v in output_values.items()},
            custom_values=(
                np.zeros(0) if custom_values is None else np.asarray(custom_values, dtype=np.float64)
            ),
            signals=signals,
            params=dict(self.params),
        )

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={getattr(v, 'value', v)}" for k, v in self.params.items())
        return f"{type(self).__name__}({args})"


# =============================================================================
# MOVING AVERAGES
# =============================================================================


class _SmoothingIndicator(TechnicalIndicator):
    """Single moving average line with a compare signal on price distance."""

    kind: MovingAvgType = MovingAvgType.SIMPLE
    output_key: str = "Ma"
    indicator_name: IndicatorName = IndicatorName.MOVING_AVERAGE

    def __init__(self, length: int = 14, dispatcher: MovingAverageDispatcher | None = None):
        self.length = _validate_length("length", length)
        super().__init__(self.indicator_name, {"length": self.length}, dispatcher)

    def smoothing_kind(self) -> MovingAvgType:
        return self.kind

    def smoothing_lengths(self) -> tuple[int | None, int | None]:
        return None, None

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        fast, slow = self.smoothing_lengths()
        line = self.smooth(context, self.smoothing_kind(), values, self.length, fast, slow)
        return self.result(
            {self.output_key: line},
            _compare_signals(values, line),
            custom_values=line,
        )


class SMA(_SmoothingIndicator):
    """Simple Moving Average."""

    kind = MovingAvgType.SIMPLE
    output_key = "Sma"
    indicator_name = IndicatorName.SIMPLE_MOVING_AVERAGE


class EMA(_SmoothingIndicator):
    """Exponential Moving Average."""

    kind = MovingAvgType.EXPONENTIAL
    output_key = "Ema"
    indicator_name = IndicatorName.EXPONENTIAL_MOVING_AVERAGE


class WMA(_SmoothingIndicator):
    """Weighted Moving Average."""

    kind = MovingAvgType.WEIGHTED
    output_key = "Wma"
    indicator_name = IndicatorName.WEIGHTED_MOVING_AVERAGE


class WellesWilderMovingAverage(_SmoothingIndicator):
    """Welles Wilder's smoothing (alpha = 1 / length)."""

    kind = MovingAvgType.WILDERS_SMOOTHING
    output_key = "Wwma"
    indicator_name = IndicatorName.WELLES_WILDER_MOVING_AVERAGE


class MovingAverage(_SmoothingIndicator):
    """
    Generic moving average over any registered smoothing kind.

    Useful for kinds without a dedicated class (Hull, KAMA, ALMA, ...).
    ``fast_length`` and ``slow_length`` only matter to the adaptive kinds;
    each kernel falls back to its own defaults when they are omitted.
    """

    output_key = "Ma"
    indicator_name = IndicatorName.MOVING_AVERAGE

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.SIMPLE,
        length: int = 14,
        fast_length: int | None = None,
        slow_length: int | None = None,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        super().__init__(length, dispatcher)
        self.ma_type = ma_type
        self.fast_length = None if fast_length is None else _validate_length("fast_length", fast_length)
        self.slow_length = None if slow_length is None else _validate_length("slow_length", slow_length)
        self.params.update(
            {"ma_type": ma_type, "fast_length": self.fast_length, "slow_length": self.slow_length}
        )

    def smoothing_kind(self) -> MovingAvgType:
        return self.ma_type

    def smoothing_lengths(self) -> tuple[int | None, int | None]:
        return self.fast_length, self.slow_length


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


class RSI(TechnicalIndicator):
    """
    Relative Strength Index.

    Average gains and losses are smoothed with ``ma_type`` (Wilder's by
    default). The ratio of the two is clamped to [0, 1] before the usual
    ``100 - 100 / (1 + rs)`` transform. A signal line over ``signal_length``
    yields a histogram that drives the oscillator signal rule with fixed
    70/30 thresholds.

    Outputs:
        Rsi, Signal, Histogram. Canonical output is Rsi.
    """

    OVERBOUGHT = 70
    OVERSOLD = 30

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.WILDERS_SMOOTHING,
        length: int = 14,
        signal_length: int = 3,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.ma_type = ma_type
        self.length = _validate_length("length", length)
        self.signal_length = _validate_length("signal_length", signal_length)
        super().__init__(
            IndicatorName.RELATIVE_STRENGTH_INDEX,
            {"ma_type": ma_type, "length": self.length, "signal_length": self.signal_length},
            dispatcher,
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values

        gains = RoundedList()
        losses = RoundedList()
        for i, value in enumerate(values):
            change = value - value_at(values, i - 1)
            gains.append(change if change > 0 else 0.0)
            losses.append(-change if change < 0 else 0.0)

        avg_gain = self.smooth(context, self.ma_type, gains.to_array(), self.length)
        avg_loss = self.smooth(context, self.ma_type, losses.to_array(), self.length)

        rsi = RoundedList()
        for gain, loss in zip(avg_gain, avg_loss):
            rs = min_or_max(gain / loss, 1, 0) if loss != 0 else 0.0
            if loss == 0:
                rsi.append(100.0)
            elif gain == 0:
                rsi.append(0.0)
            else:
                rsi.append(min_or_max(100 - (100 / (1 + rs)), 100, 0))

        signal_line = self.smooth(context, self.ma_type, rsi.to_array(), self.signal_length)
        histogram = RoundedList()
        signals = []
        for i, current in enumerate(rsi):
            prev_histogram = histogram.last()
            histogram.append(current - signal_line[i])
            signals.append(
                rsi_signal(
                    histogram[-1],
                    prev_histogram,
                    current,
                    value_at(rsi, i - 1),
                    self.OVERBOUGHT,
                    self.OVERSOLD,
                )
            )

        return self.result(
            {"Rsi": rsi, "Signal": signal_line, "Histogram": histogram},
            signals,
            custom_values=rsi,
        )


class MACD(TechnicalIndicator):
    """Moving Average Convergence Divergence."""

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.EXPONENTIAL,
        fast_length: int = 12,
        slow_length: int = 26,
        signal_length: int = 9,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.ma_type = ma_type
        self.fast_length = _validate_length("fast_length", fast_length)
        self.slow_length = _validate_length("slow_length", slow_length)
        self.signal_length = _validate_length("signal_length", signal_length)
        super().__init__(
            IndicatorName.MOVING_AVERAGE_CONVERGENCE_DIVERGENCE,
            {
                "ma_type": ma_type,
                "fast_length": self.fast_length,
                "slow_length": self.slow_length,
                "signal_length": self.signal_length,
            },
            dispatcher,
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        fast = self.smooth(context, self.ma_type, values, self.fast_length)
        slow = self.smooth(context, self.ma_type, values, self.slow_length)

        macd = RoundedList()
        for fast_value, slow_value in zip(fast, slow):
            macd.append(fast_value - slow_value)

        signal_line = self.smooth(context, self.ma_type, macd.to_array(), self.signal_length)
        histogram = RoundedList()
        signals = []
        for i, value in enumerate(macd):
            prev_histogram = histogram.last()
            histogram.append(value - signal_line[i])
            signals.append(compare_signal(histogram[-1], prev_histogram))

        return self.result(
            {"Macd": macd, "Signal": signal_line, "Histogram": histogram},
            signals,
            custom_values=macd,
        )


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


class StandardDeviationVolatility(TechnicalIndicator):
    """
    Standard Deviation Volatility.

    Deviation is measured from a ``ma_type`` average; the variance is the
    trailing mean of squared deviations. An EMA of the standard deviation
    acts as the threshold: a directional signal (slope of price against its
    EMA) is only emitted while volatility is at or above it.

    Outputs:
        StdDev, Variance, Signal. Canonical output is StdDev.
    """

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.SIMPLE,
        length: int = 20,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.ma_type = ma_type
        self.length = _validate_length("length", length)
        super().__init__(
            IndicatorName.STANDARD_DEVIATION_VOLATILITY,
            {"ma_type": ma_type, "length": self.length},
            dispatcher,
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        average = self.smooth(context, self.ma_type, values, self.length)
        ema = self.smooth(context, MovingAvgType.EXPONENTIAL, values, self.length)
        std_dev, variance = transforms.standard_deviation(values, average, self.length)

        std_dev_ema = RoundedList()
        signals = []
        for i, value in enumerate(values):
            std_dev_ema.append(calculate_ema_step(std_dev[i], std_dev_ema.last(), self.length))
            slope = value - ema[i]
            prev_slope = value_at(values, i - 1) - value_at(ema, i - 1)
            signals.append(volatility_signal(slope, prev_slope, std_dev[i], std_dev_ema[-1]))

        return self.result(
            {"StdDev": std_dev, "Variance": variance, "Signal": std_dev_ema},
            signals,
            custom_values=std_dev,
        )


class HistoricalVolatility(TechnicalIndicator):
    """
    Annualised (sqrt(365)) standard deviation of log returns, in percent.

    The deviation is taken around a simple average of the returns;
    ``ma_type`` drives the price average behind the signal slope.
    """

    ANNUAL_SQRT = math.sqrt(365)

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.EXPONENTIAL,
        length: int = 20,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.ma_type = ma_type
        self.length = _validate_length("length", length)
        super().__init__(
            IndicatorName.HISTORICAL_VOLATILITY,
            {"ma_type": ma_type, "length": self.length},
            dispatcher,
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        ema = self.smooth(context, self.ma_type, values, self.length)

        log_returns = RoundedList()
        for i, value in enumerate(values):
            prev = value_at(values, i - 1)
            ratio = value / prev if prev != 0 else 0.0
            log_returns.append(math.log(ratio) if ratio > 0 else 0.0)

        std_dev = StandardDeviationVolatility(
            MovingAvgType.SIMPLE, self.length, dispatcher=self.dispatcher
        ).calculate(context, log_returns.to_array()).custom_values

        hv = RoundedList()
        signals = []
        for i, value in enumerate(values):
            prev_hv = hv.last()
            hv.append(100 * value_at(std_dev, i) * self.ANNUAL_SQRT)
            slope = value - ema[i]
            prev_slope = value_at(values, i - 1) - value_at(ema, i - 1)
            signals.append(volatility_signal(slope, prev_slope, hv[-1], prev_hv))

        return self.result({"Hv": hv}, signals, custom_values=hv)


class AverageTrueRange(TechnicalIndicator):
    """Average True Range."""

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.WILDERS_SMOOTHING,
        length: int = 14,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.ma_type = ma_type
        self.length = _validate_length("length", length)
        super().__init__(
            IndicatorName.AVERAGE_TRUE_RANGE,
            {"ma_type": ma_type, "length": self.length},
            dispatcher,
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        resolved = self.resolve(context, source)
        values = resolved.values
        average = self.smooth(context, self.ma_type, values, self.length)

        ranges = RoundedList()
        for i in range(len(values)):
            ranges.append(true_range(resolved.high[i], resolved.low[i], value_at(values, i - 1)))
        atr = self.smooth(context, self.ma_type, ranges.to_array(), self.length)

        signals = []
        for i, value in enumerate(values):
            atr_ema = calculate_ema_step(atr[i], value_at(atr, i - 1), self.length)
            slope = value - average[i]
            prev_slope = value_at(values, i - 1) - value_at(average, i - 1)
            signals.append(volatility_signal(slope, prev_slope, atr[i], atr_ema))

        return self.result({"Atr": atr}, signals, custom_values=atr)


class BollingerBands(TechnicalIndicator):
    """
    Bollinger Bands.

    ``middle = MA(length)``, ``upper/lower = middle +/- std_dev_mult * stdDev``.
    There is no canonical output: three bands are produced, so chaining
    another indicator from this one without an explicit source raises
    ``ScalarInputRequiredError``.

    Outputs:
        UpperBand, MiddleBand, LowerBand.
    """

    def __init__(
        self,
        ma_type: MovingAvgType = MovingAvgType.SIMPLE,
        length: int = 20,
        std_dev_mult: float = 2.0,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.ma_type = ma_type
        self.length = _validate_length("length", length)
        self.std_dev_mult = float(std_dev_mult)
        super().__init__(
            IndicatorName.BOLLINGER_BANDS,
            {"ma_type": ma_type, "length": self.length, "std_dev_mult": self.std_dev_mult},
            dispatcher,
        )

    def bands(
        self, context: TimeSeriesContext, values: np.ndarray
    ) -> tuple[RoundedList, np.ndarray, RoundedList]:
        """Return (upper, middle, lower) bands of ``values``."""
        middle = self.smooth(context, self.ma_type, values, self.length)
        std_dev = StandardDeviationVolatility(
            self.ma_type, self.length, dispatcher=self.dispatcher
        ).calculate(context, values).custom_values

        upper = RoundedList()
        lower = RoundedList()
        for i in range(len(values)):
            offset = value_at(std_dev, i) * self.std_dev_mult
            upper.append(middle[i] + offset)
            lower.append(middle[i] - offset)
        return upper, middle, lower

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        upper, middle, lower = self.bands(context, values)

        signals = []
        for i, value in enumerate(values):
            prev_value = value_at(values, i - 1)
            signals.append(
                bollinger_bands_signal(
                    value - middle[i],
                    prev_value - value_at(middle, i - 1),
                    value,
                    prev_value,
                    upper[i],
                    value_at(upper, i - 1),
                    lower[i],
                    value_at(lower, i - 1),
                )
            )

        return self.result(
            {"UpperBand": upper, "MiddleBand": middle, "LowerBand": lower},
            signals,
        )


class BollingerBandsPercentB(TechnicalIndicator):
    """Position of price within the Bollinger envelope, 0 at lower and 100 at upper."""

    def __init__(
        self,
        std_dev_mult: float = 2.0,
        ma_type: MovingAvgType = MovingAvgType.SIMPLE,
        length: int = 20,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.bollinger = BollingerBands(ma_type, length, std_dev_mult, dispatcher)
        super().__init__(
            IndicatorName.BOLLINGER_BANDS_PERCENT_B, dict(self.bollinger.params), dispatcher
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        upper, _, lower = self.bollinger.bands(context, values)

        pct_b = RoundedList()
        signals = []
        for i, value in enumerate(values):
            span = upper[i] - lower[i]
            prev1 = pct_b.last()
            prev2 = value_at(pct_b, i - 2)
            pct_b.append((value - lower[i]) / span * 100 if span != 0 else 0.0)
            signals.append(rsi_signal(pct_b[-1] - prev1, prev1 - prev2, pct_b[-1], prev1, 100, 0))

        return self.result({"PctB": pct_b}, signals, custom_values=pct_b)


class BollingerBandsWidth(TechnicalIndicator):
    """Band width relative to the middle band."""

    def __init__(
        self,
        std_dev_mult: float = 2.0,
        ma_type: MovingAvgType = MovingAvgType.SIMPLE,
        length: int = 20,
        dispatcher: MovingAverageDispatcher | None = None,
    ):
        self.bollinger = BollingerBands(ma_type, length, std_dev_mult, dispatcher)
        super().__init__(
            IndicatorName.BOLLINGER_BANDS_WIDTH, dict(self.bollinger.params), dispatcher
        )

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        values = self.resolve(context, source).values
        upper, middle, lower = self.bollinger.bands(context, values)

        width = RoundedList()
        signals = []
        for i, value in enumerate(values):
            prev_width = width.last()
            width.append((upper[i] - lower[i]) / middle[i] if middle[i] != 0 else 0.0)
            slope = value - middle[i]
            prev_slope = value_at(values, i - 1) - value_at(middle, i - 1)
            signals.append(volatility_signal(slope, prev_slope, width[-1], prev_width))

        return self.result({"BbWidth": width}, signals, custom_values=width)


# =============================================================================
# PRICE TRANSFORMS
# =============================================================================


class _PriceTransform(TechnicalIndicator):
    """Per-bar combination of the resolved input with its companion prices."""

    output_key: str = ""
    indicator_name: IndicatorName = IndicatorName.NONE

    def __init__(self, dispatcher: MovingAverageDispatcher | None = None):
        super().__init__(self.indicator_name, {}, dispatcher)

    @abstractmethod
    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        pass

    def signals(self, resolved: ResolvedInput, values: np.ndarray) -> list[Signal]:
        return _momentum_signals(values)

    def calculate(self, context: TimeSeriesContext, source: Source = None) -> IndicatorResult:
        resolved = self.resolve(context, source)
        values = self.transform(resolved)
        return self.result(
            {self.output_key: values},
            self.signals(resolved, values),
            custom_values=values,
        )


class TypicalPrice(_PriceTransform):
    """(high + low + close) / 3"""

    output_key = "Tp"
    indicator_name = IndicatorName.TYPICAL_PRICE

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return transforms.typical_price(resolved.high, resolved.low, resolved.values)


class FullTypicalPrice(_PriceTransform):
    """(high + low + close + open) / 4"""

    output_key = "FullTp"
    indicator_name = IndicatorName.FULL_TYPICAL_PRICE

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return transforms.full_typical_price(
            resolved.high, resolved.low, resolved.values, resolved.open
        )


class MedianPrice(_PriceTransform):
    """(high + low) / 2"""

    output_key = "MedianPrice"
    indicator_name = IndicatorName.MEDIAN_PRICE

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return transforms.median_price(resolved.high, resolved.low)


class AveragePrice(_PriceTransform):
    """(open + close) / 2"""

    output_key = "AveragePrice"
    indicator_name = IndicatorName.AVERAGE_PRICE

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return transforms.average_price(resolved.open, resolved.values)


class WeightedClose(_PriceTransform):
    """(high + low + 2 * close) / 4"""

    output_key = "WeightedClose"
    indicator_name = IndicatorName.WEIGHTED_CLOSE

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return transforms.weighted_close(resolved.high, resolved.low, resolved.values)

    def signals(self, resolved: ResolvedInput, values: np.ndarray) -> list[Signal]:
        return _compare_signals(resolved.values, values)


class Midpoint(_PriceTransform):
    """Halfway between the highest and lowest input over ``length`` bars."""

    output_key = "HCLC2"
    indicator_name = IndicatorName.MIDPOINT

    def __init__(self, length: int = 14, dispatcher: MovingAverageDispatcher | None = None):
        super().__init__(dispatcher)
        self.length = _validate_length("length", length)
        self.params["length"] = self.length

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return transforms.midpoint(resolved.values, self.length)

    def signals(self, resolved: ResolvedInput, values: np.ndarray) -> list[Signal]:
        return _compare_signals(resolved.values, values)


class Midprice(_PriceTransform):
    """Halfway between the highest high and lowest low over ``length`` bars."""

    output_key = "HHLL2"
    indicator_name = IndicatorName.MIDPRICE

    def __init__(self, length: int = 14, dispatcher: MovingAverageDispatcher | None = None):
        super().__init__(dispatcher)
        self.length = _validate_length("length", length)
        self.params["length"] = self.length

    def transform(self, resolved: ResolvedInput) -> np.ndarray:
        return pad_to(transforms.midprice(resolved.high, resolved.low, self.length), len(resolved.values))

    def signals(self, resolved: ResolvedInput, values: np.ndarray) -> list[Signal]:
        return _compare_signals(resolved.values, values)
