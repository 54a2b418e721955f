"""
Input resolution for indicator computations.

Decides which series an indicator reads at each stage of a pipeline:

1. The previous indicator's canonical output, when there is one.
2. An error, when the previous indicator emitted signals but has no single
   output to chain from.
3. Otherwise the context's base series (close prices by default).

High and low companions are the context's own arrays unless the resolved
series is clearly not a price (it is the volume series, or its sum falls
outside the low/high envelope), in which case they are synthesized from
the series itself.

Callers that chain explicitly pass a previous result or a raw series to
``resolve_source`` instead, which bypasses the pipeline state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from stock_indicators.core.data_types import InputName
from stock_indicators.core.exceptions import ScalarInputRequiredError
from stock_indicators.core.utils import pad_to, rolling_max_min, round_series
from stock_indicators.indicators import transforms
from stock_indicators.indicators.context import IndicatorResult, TimeSeriesContext


@dataclass(frozen=True)
class ResolvedInput:
    """Series an indicator computes on, aligned to the context count."""

    values: np.ndarray
    high: np.ndarray
    low: np.ndarray
    open: np.ndarray
    volume: np.ndarray


def resolve_named_input(context: TimeSeriesContext, input_name: InputName) -> np.ndarray:
    """Return the base series selected by ``input_name``.

    Derived names are computed from the context's price arrays; the
    context's scratch state is never touched.
    """
    ctx = context
    name = InputName(input_name)
    if name in (InputName.CLOSE, InputName.ADJUSTED_CLOSE):
        return ctx.close_prices
    if name == InputName.OPEN:
        return ctx.open_prices
    if name == InputName.HIGH:
        return ctx.high_prices
    if name == InputName.LOW:
        return ctx.low_prices
    if name == InputName.VOLUME:
        return ctx.volumes
    if name == InputName.TYPICAL_PRICE:
        return transforms.typical_price(ctx.high_prices, ctx.low_prices, ctx.close_prices)
    if name == InputName.FULL_TYPICAL_PRICE:
        return transforms.full_typical_price(
            ctx.high_prices, ctx.low_prices, ctx.close_prices, ctx.open_prices
        )
    if name == InputName.MEDIAN_PRICE:
        return transforms.median_price(ctx.high_prices, ctx.low_prices)
    if name == InputName.WEIGHTED_CLOSE:
        return transforms.weighted_close(ctx.high_prices, ctx.low_prices, ctx.close_prices)
    if name == InputName.AVERAGE_PRICE:
        return transforms.average_price(ctx.open_prices, ctx.close_prices)
    if name == InputName.MIDPOINT:
        return transforms.midpoint(ctx.close_prices)
    if name == InputName.MIDPRICE:
        return transforms.midprice(ctx.high_prices, ctx.low_prices)
    return ctx.close_prices


def derive_high_low(
    values: np.ndarray,
    context: TimeSeriesContext,
    length: int = 0,
) -> tuple[np.ndarray, np.ndarray]:
    """Pick or synthesize the high/low companions of ``values``.

    Args:
        values: Resolved input series.
        context: Context supplying the real high/low arrays.
        length: Window for synthesized extremes; at least 2 is used.

    Returns:
        Tuple of (high, low) arrays.
    """
    high = pad_to(context.high_prices, context.count)
    low = pad_to(context.low_prices, context.count)
    if len(values) == 0:
        return high, low

    total = float(np.sum(values))
    volumes = pad_to(context.volumes, context.count)
    if (
        np.array_equal(values, volumes)
        or total < float(np.sum(low))
        or total > float(np.sum(high))
    ):
        return rolling_max_min(values, length)
    return high, low


def resolve_input(context: TimeSeriesContext) -> ResolvedInput:
    """Resolve the series the next indicator should compute on.

    Raises:
        ScalarInputRequiredError: If the previous indicator emitted signals
            but left no canonical output to chain from.
    """
    count = context.count
    if len(context.custom_values) > 0:
        values = context.custom_values
    elif len(context.signals) > 0:
        raise ScalarInputRequiredError(context.indicator_name)
    else:
        values = resolve_named_input(context, context.input_name)

    values = pad_to(values, count)
    high, low = derive_high_low(values, context)
    return ResolvedInput(
        values=values,
        high=high,
        low=low,
        open=pad_to(context.open_prices, count),
        volume=pad_to(context.volumes, count),
    )


def resolve_source(
    context: TimeSeriesContext,
    source: IndicatorResult | np.ndarray | Sequence[float],
) -> ResolvedInput:
    """Resolve an explicitly supplied input instead of the pipeline state.

    Args:
        context: Context supplying the companion price arrays.
        source: A previous result, whose canonical output is used, or a
            raw series.

    Raises:
        ScalarInputRequiredError: If ``source`` is a result without a
            canonical output.
    """
    if isinstance(source, IndicatorResult):
        if not source.has_single_output:
            raise ScalarInputRequiredError(source.name)
        source = source.custom_values

    count = context.count
    values = pad_to(round_series(source), count)
    high, low = derive_high_low(values, context)
    return ResolvedInput(
        values=values,
        high=high,
        low=low,
        open=pad_to(context.open_prices, count),
        volume=pad_to(context.volumes, count),
    )
