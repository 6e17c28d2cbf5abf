"""Indicator aggregation — one fully populated snapshot per timeframe.

Pure function of ``(bars, quote)``; no I/O and no module-level state.
"""

from scalpbot.broker.models import Bar, Quote
from scalpbot.strategy.indicators import (
    atr,
    bollinger_bands,
    macd,
    mfi,
    rsi,
    stochastic_rsi,
    vwap,
)
from scalpbot.strategy.models import (
    BollingerBands,
    IndicatorSnapshot,
    MACDResult,
    MomentumAnalysis,
    TrendAnalysis,
    VolumeAnalysis,
)
from scalpbot.strategy.sr_levels import find_resistance_levels, find_support_levels
from scalpbot.strategy.trend import analyze_momentum, detect_trend
from scalpbot.strategy.volume import analyze_volume


def neutral_snapshot(quote: Quote) -> IndicatorSnapshot:
    """Snapshot used when no bar history is available."""
    price = quote.last
    return IndicatorSnapshot(
        vwap=price,
        rsi=50.0,
        macd=MACDResult(value=0.0, signal=0.0, histogram=0.0),
        stoch_rsi=50.0,
        atr=0.0,
        volume_analysis=VolumeAnalysis(profile="average", trend="neutral", strength=50, ratio=1.0),
        momentum=MomentumAnalysis(direction="neutral", strength=50, acceleration="stable", roc=0.0),
        trend=TrendAnalysis(
            direction="sideways", strength="weak", ema20=price, ema50=price, ema_stack="mixed",
        ),
        mfi=50.0,
        bollinger_bands=BollingerBands(
            upper=price, middle=price, lower=price, width=0.0, position="middle",
        ),
        support_levels=(),
        resistance_levels=(),
        strength=50,
    )


def composite_strength(
    rsi_value: float,
    macd_result: MACDResult,
    momentum: MomentumAnalysis,
    volume: VolumeAnalysis,
) -> int:
    """Blend RSI, MACD, momentum and volume into a 10–90 score.

    Starts at 50, adds ``(rsi - 50) × 0.4``, ±10 for the MACD histogram
    sign, ±15 for momentum direction and ``(volume strength - 50) × 0.3``.
    """
    score = 50.0
    score += (rsi_value - 50) * 0.4

    if macd_result.histogram > 0:
        score += 10
    elif macd_result.histogram < 0:
        score -= 10

    if momentum.direction == "bullish":
        score += 15
    elif momentum.direction == "bearish":
        score -= 15

    score += (volume.strength - 50) * 0.3

    return int(round(min(90.0, max(10.0, score))))


def compute_indicators(bars: list[Bar], quote: Quote) -> IndicatorSnapshot:
    """Compute every indicator for one bar window.

    Args:
        bars: OHLCV bars, oldest-first.  May be empty.
        quote: Latest quote; ``quote.last`` is the current price used for
            support/resistance placement and the VWAP fallback.

    Returns:
        A fully populated ``IndicatorSnapshot``.  Empty *bars* yields
        :func:`neutral_snapshot`.
    """
    if not bars:
        return neutral_snapshot(quote)

    highs = [b.high for b in bars]
    lows = [b.low for b in bars]
    closes = [b.close for b in bars]
    volumes = [float(b.volume) for b in bars]

    vwap_value = vwap(highs, lows, closes, volumes)
    if vwap_value is None:
        vwap_value = quote.last

    rsi_value = rsi(closes, 14)
    macd_result = macd(closes)
    volume = analyze_volume(volumes)
    momentum = analyze_momentum(closes)

    return IndicatorSnapshot(
        vwap=vwap_value,
        rsi=rsi_value,
        macd=macd_result,
        stoch_rsi=stochastic_rsi(closes, 14),
        atr=atr(highs, lows, closes, 14),
        volume_analysis=volume,
        momentum=momentum,
        trend=detect_trend(highs, lows, closes),
        mfi=mfi(highs, lows, closes, volumes, 14),
        bollinger_bands=bollinger_bands(closes, 20),
        support_levels=tuple(find_support_levels(lows, quote.last, vwap=vwap_value)),
        resistance_levels=tuple(find_resistance_levels(highs, quote.last, vwap=vwap_value)),
        strength=composite_strength(rsi_value, macd_result, momentum, volume),
    )
