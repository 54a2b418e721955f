"""
Time series context threaded through indicator computations.

The context holds the aligned OHLCV arrays plus the scratch state written by
the most recent indicator: named output series, the canonical scalar series
used for chaining, one signal per bar and a name stamp. Indicators produce
an ``IndicatorResult`` and apply it to the context, so callers can chain
either through the context or through results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Sequence

import numpy as np
import polars as pl

from stock_indicators.core.data_types import IndicatorName, InputName, Signal, TickerBar
from stock_indicators.core.exceptions import DataValidationError
from stock_indicators.core.utils import round_value
from stock_indicators.monitoring.logger import LogCategory, get_logger

if TYPE_CHECKING:
    from stock_indicators.indicators.technical import TechnicalIndicator

logger = get_logger(__name__, LogCategory.DATA)

OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")


def validate_bar_count(*series: Sequence[Any] | None) -> int | None:
    """Return the common length of the given series.

    ``None`` entries are skipped.

    Returns:
        The shared length, or ``None`` when the lengths disagree.
    """
    lengths = {len(s) for s in series if s is not None}
    if len(lengths) > 1:
        return None
    return lengths.pop() if lengths else 0


@dataclass(frozen=True)
class IndicatorResult:
    """Output of a single indicator computation."""

    name: IndicatorName
    output_values: dict[str, np.ndarray] = field(default_factory=dict)
    custom_values: np.ndarray = field(default_factory=lambda: np.zeros(0))
    signals: list[Signal] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> np.ndarray:
        return self.output_values[key]

    @property
    def has_single_output(self) -> bool:
        return len(self.custom_values) > 0


class TimeSeriesContext:
    """Aligned OHLCV series plus the state of the last computation.

    Attributes:
        open_prices, high_prices, low_prices, close_prices, volumes: Aligned
            float64 arrays, one entry per bar.
        dates: Bar timestamps; may be empty.
        count: Common length of the arrays, or 0 when they disagree.
        input_name: Base series used when no chained output is present.
        custom_values: Canonical scalar output of the last indicator.
        output_values: Named outputs of the last indicator.
        signals: One signal per bar from the last indicator.
        indicator_name: Stamp of the last indicator.
    """

    def __init__(
        self,
        open_prices: Sequence[float] | np.ndarray,
        high_prices: Sequence[float] | np.ndarray,
        low_prices: Sequence[float] | np.ndarray,
        close_prices: Sequence[float] | np.ndarray,
        volumes: Sequence[float] | np.ndarray,
        dates: Sequence[datetime] | None = None,
        input_name: InputName = InputName.CLOSE,
        symbol: str | None = None,
    ) -> None:
        self.open_prices = np.asarray(open_prices, dtype=np.float64)
        self.high_prices = np.asarray(high_prices, dtype=np.float64)
        self.low_prices = np.asarray(low_prices, dtype=np.float64)
        self.close_prices = np.asarray(close_prices, dtype=np.float64)
        self.volumes = np.asarray(volumes, dtype=np.float64)
        self.dates: list[datetime] = list(dates) if dates is not None else []
        self.input_name = InputName(input_name)
        self.symbol = symbol

        count = validate_bar_count(
            self.open_prices,
            self.high_prices,
            self.low_prices,
            self.close_prices,
            self.volumes,
            self.dates or None,
        )
        if count is None:
            logger.with_context(symbol=symbol).warning(
                "Series lengths disagree; context count set to 0",
                extra={
                    "extra_data": {
                        "open": len(self.open_prices),
                        "high": len(self.high_prices),
                        "low": len(self.low_prices),
                        "close": len(self.close_prices),
                        "volume": len(self.volumes),
                        "dates": len(self.dates),
                    }
                },
            )
            count = 0
        self.count: int = count

        self.custom_values: np.ndarray = np.zeros(0)
        self.output_values: dict[str, np.ndarray] = {}
        self.signals: list[Signal] = []
        self.indicator_name = IndicatorName.NONE
        self.last_result: IndicatorResult | None = None
        self._bars: list[TickerBar] | None = None

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_bars(
        cls,
        bars: Iterable[TickerBar],
        input_name: InputName = InputName.CLOSE,
        symbol: str | None = None,
    ) -> "TimeSeriesContext":
        """Build a context from bar records, rounding every value.

        Args:
            bars: Bars in chronological order.
            input_name: Base series for the first computation.
            symbol: Optional ticker for log context.

        Returns:
            New context.
        """
        bars = list(bars)
        context = cls(
            [round_value(b.open) for b in bars],
            [round_value(b.high) for b in bars],
            [round_value(b.low) for b in bars],
            [round_value(b.close) for b in bars],
            [round_value(b.volume) for b in bars],
            dates=[b.timestamp for b in bars],
            input_name=input_name,
            symbol=symbol,
        )
        context._bars = bars
        return context

    @classmethod
    def from_frame(
        cls,
        df: pl.DataFrame,
        input_name: InputName = InputName.CLOSE,
        symbol: str | None = None,
    ) -> "TimeSeriesContext":
        """Build a context from a polars frame.

        The frame needs ``open, high, low, close, volume`` columns and may
        carry a ``timestamp`` column.

        Raises:
            DataValidationError: If a required column is missing.
        """
        missing = [col for col in OHLCV_COLUMNS if col not in df.columns]
        if missing:
            raise DataValidationError(
                f"Frame is missing required columns: {missing}",
                field="columns",
                value=df.columns,
                expected=", ".join(OHLCV_COLUMNS),
            )

        dates = df["timestamp"].to_list() if "timestamp" in df.columns else None
        return cls(
            df["open"].cast(pl.Float64).to_numpy(),
            df["high"].cast(pl.Float64).to_numpy(),
            df["low"].cast(pl.Float64).to_numpy(),
            df["close"].cast(pl.Float64).to_numpy(),
            df["volume"].cast(pl.Float64).to_numpy(),
            dates=dates,
            input_name=input_name,
            symbol=symbol,
        )

    @property
    def bars(self) -> list[TickerBar]:
        """Bar records for the context; rebuilt from the arrays when needed."""
        if self._bars is None:
            if len(self.dates) != self.count:
                return []
            self._bars = [
                TickerBar(
                    timestamp=self.dates[i],
                    open=float(self.open_prices[i]),
                    high=float(self.high_prices[i]),
                    low=float(self.low_prices[i]),
                    close=float(self.close_prices[i]),
                    volume=float(self.volumes[i]),
                )
                for i in range(self.count)
            ]
        return self._bars

    # =========================================================================
    # Pipeline State
    # =========================================================================

    def clear(self) -> "TimeSeriesContext":
        """Forget the previous computation's scalar output and signals.

        Price arrays and named outputs are kept.
        """
        self.signals = []
        self.custom_values = np.zeros(0)
        self.last_result = None
        return self

    def apply(self, result: IndicatorResult) -> "TimeSeriesContext":
        """Overwrite the scratch state with ``result``."""
        self.output_values = dict(result.output_values)
        self.custom_values = np.asarray(result.custom_values, dtype=np.float64)
        self.signals = list(result.signals)
        self.indicator_name = result.name
        self.last_result = result
        return self

    def pipe(self, indicator: "TechnicalIndicator") -> "TimeSeriesContext":
        """Run ``indicator`` on this context and return it for chaining."""
        return indicator.compute(self)

    def to_frame(self) -> pl.DataFrame:
        """Export the last computation's outputs and signals as a frame.

        Returns:
            Frame with one row per bar: an optional ``timestamp`` column,
            one column per output series and a ``signal`` column.
        """
        columns: dict[str, Any] = {}
        if len(self.dates) == self.count:
            columns["timestamp"] = self.dates
        for key, values in self.output_values.items():
            if len(values) == self.count:
                columns[key] = np.asarray(values, dtype=np.float64)
        if len(self.signals) == self.count:
            columns["signal"] = [s.value for s in self.signals]
        return pl.DataFrame(columns)

    def __len__(self) -> int:
        return self.count

    def __repr__(self) -> str:
        return (
            f"TimeSeriesContext(count={self.count}, "
            f"indicator={self.indicator_name.value}, input={self.input_name.value})"
        )
