"""
Signal classification rules.

Pure functions mapping the current and previous values of a comparison
series (and, for some rules, an oscillator, band or volatility reading) to
a categorical ``Signal``. Every rule accepts ``is_reversed`` to swap the
buy and sell polarity for contrarian indicators.
"""

from __future__ import annotations

from stock_indicators.core.data_types import Signal

_OPPOSITE = {
    Signal.NONE: Signal.NONE,
    Signal.BUY: Signal.SELL,
    Signal.SELL: Signal.BUY,
    Signal.STRONG_BUY: Signal.STRONG_SELL,
    Signal.STRONG_SELL: Signal.STRONG_BUY,
}


def _strong_signal(current: float, previous: float, is_reversed: bool) -> Signal:
    """Strong buy/sell when the series is signed and accelerating."""
    if not is_reversed:
        if current > 0 and current > previous:
            return Signal.STRONG_BUY
        if current < 0 and current < previous:
            return Signal.STRONG_SELL
    else:
        if current < 0 and current < previous:
            return Signal.STRONG_BUY
        if current > 0 and current > previous:
            return Signal.STRONG_SELL
    return Signal.NONE


def compare_signal(current: float, previous: float, is_reversed: bool = False) -> Signal:
    """Classify a comparison series by sign and momentum.

    Args:
        current: Current value of the comparison series.
        previous: Previous value of the comparison series.
        is_reversed: Swap buy and sell polarity.

    Returns:
        STRONG_BUY when positive and rising, STRONG_SELL when negative and
        falling, otherwise BUY/SELL by sign, otherwise NONE.
    """
    strong = _strong_signal(current, previous, is_reversed)
    if strong != Signal.NONE:
        return strong

    if current > 0:
        return Signal.SELL if is_reversed else Signal.BUY
    if current < 0:
        return Signal.BUY if is_reversed else Signal.SELL
    return Signal.NONE


def rsi_signal(
    current: float,
    previous: float,
    current_rsi: float,
    prev_rsi: float,
    overbought: float = 70,
    oversold: float = 30,
    is_reversed: bool = False,
) -> Signal:
    """Classify an oscillator against overbought/oversold thresholds.

    Beyond the strong rules of ``compare_signal``, a BUY is also emitted when
    the oscillator crosses up through ``oversold`` and a SELL when it crosses
    down through ``overbought``.
    """
    strong = _strong_signal(current, previous, is_reversed)
    if strong != Signal.NONE:
        return strong

    if not is_reversed:
        if current > 0 or (prev_rsi < oversold and current_rsi > oversold):
            return Signal.BUY
        if current < 0 or (prev_rsi > overbought and current_rsi < overbought):
            return Signal.SELL
    else:
        if current < 0 or (prev_rsi > oversold and current_rsi < oversold):
            return Signal.BUY
        if current > 0 or (prev_rsi < overbought and current_rsi > overbought):
            return Signal.SELL
    return Signal.NONE


def bollinger_bands_signal(
    current: float,
    previous: float,
    value: float,
    prev_value: float,
    upper_band: float,
    prev_upper_band: float,
    lower_band: float,
    prev_lower_band: float,
    is_reversed: bool = False,
) -> Signal:
    """Classify price against a band envelope.

    BUY on a positive slope or when price re-enters from below the lower
    band; SELL on a negative slope or when price falls back inside from
    above the upper band.
    """
    strong = _strong_signal(current, previous, is_reversed)
    if strong != Signal.NONE:
        return strong

    re_entered_from_below = prev_value < prev_lower_band and value > lower_band
    fell_back_from_above = prev_value > prev_upper_band and value < upper_band
    if not is_reversed:
        if current > 0 or re_entered_from_below:
            return Signal.BUY
        if current < 0 or fell_back_from_above:
            return Signal.SELL
    else:
        if current < 0 or fell_back_from_above:
            return Signal.BUY
        if current > 0 or re_entered_from_below:
            return Signal.SELL
    return Signal.NONE


def volatility_signal(
    current: float,
    previous: float,
    volatility: float,
    threshold: float,
    is_reversed: bool = False,
) -> Signal:
    """Compare signal gated on volatility reaching ``threshold``."""
    if volatility < threshold:
        return Signal.NONE
    return compare_signal(current, previous, is_reversed)


def bullish_bearish_signal(
    bullish_slope: float,
    prev_bullish_slope: float,
    bearish_slope: float,
    prev_bearish_slope: float,
    is_reversed: bool = False,
) -> Signal:
    """Classify two separate slopes, one driving buys and one driving sells.

    The bullish slope is checked first, so it wins when both fire. Reversal
    swaps the resulting polarity.
    """
    if bullish_slope > 0 and bullish_slope > prev_bullish_slope:
        signal = Signal.STRONG_BUY
    elif bearish_slope < 0 and bearish_slope < prev_bearish_slope:
        signal = Signal.STRONG_SELL
    elif bullish_slope > 0:
        signal = Signal.BUY
    elif bearish_slope < 0:
        signal = Signal.SELL
    else:
        signal = Signal.NONE
    return _OPPOSITE[signal] if is_reversed else signal


def condition_signal(bullish: bool, bearish: bool) -> Signal:
    if bullish:
        return Signal.BUY
    if bearish:
        return Signal.SELL
    return Signal.NONE
