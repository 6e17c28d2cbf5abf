"""Trend and momentum detection.

Provides two classifiers:
- ``detect_trend()``: EMA20/EMA50 position plus the higher-high /
  higher-low pattern of the last three bars, and the EMA9/21/50 stack.
- ``analyze_momentum()``: short-window rate of change with an
  acceleration read from half-segment slopes.
"""

from scalpbot.strategy.indicators import ema
from scalpbot.strategy.models import MomentumAnalysis, TrendAnalysis


def _non_decreasing(values: list[float]) -> bool:
    return all(values[i] >= values[i - 1] for i in range(1, len(values)))


def _non_increasing(values: list[float]) -> bool:
    return all(values[i] <= values[i - 1] for i in range(1, len(values)))


def ema_stack(closes: list[float]) -> str:
    """Classify EMA alignment.

    Returns ``"bullish"`` when EMA9 > EMA21 > EMA50, ``"bearish"`` for the
    reverse order, otherwise ``"mixed"``.  Needs at least 50 closes.
    """
    if len(closes) < 50:
        return "mixed"

    ema9 = ema(closes, 9)
    ema21 = ema(closes, 21)
    ema50 = ema(closes, 50)

    if ema9 > ema21 > ema50:
        return "bullish"
    if ema9 < ema21 < ema50:
        return "bearish"
    return "mixed"


def detect_trend(
    highs: list[float],
    lows: list[float],
    closes: list[float],
) -> TrendAnalysis:
    """Classify trend direction and strength.

    Rules:
        - **Strong uptrend**: last three highs and lows non-decreasing AND
          price > EMA20 > EMA50.
        - **Strong downtrend**: last three highs and lows non-increasing
          AND price < EMA20 < EMA50.
        - **Moderate**: otherwise, uptrend if price > EMA20, downtrend if
          price < EMA20.
        - **Sideways / weak**: price sits on EMA20.

    EMAs fall back to the last close when there is not enough history.
    """
    if not closes:
        return TrendAnalysis(
            direction="sideways", strength="weak", ema20=0.0, ema50=0.0, ema_stack="mixed",
        )

    price = closes[-1]
    ema20 = ema(closes, 20)
    ema50 = ema(closes, 50)

    recent_highs = highs[-3:]
    recent_lows = lows[-3:]
    higher_structure = (
        len(recent_highs) == 3
        and _non_decreasing(recent_highs)
        and _non_decreasing(recent_lows)
    )
    lower_structure = (
        len(recent_highs) == 3
        and _non_increasing(recent_highs)
        and _non_increasing(recent_lows)
    )

    if higher_structure and price > ema20 > ema50:
        direction, strength = "uptrend", "strong"
    elif lower_structure and price < ema20 < ema50:
        direction, strength = "downtrend", "strong"
    elif price > ema20:
        direction, strength = "uptrend", "moderate"
    elif price < ema20:
        direction, strength = "downtrend", "moderate"
    else:
        direction, strength = "sideways", "weak"

    return TrendAnalysis(
        direction=direction,
        strength=strength,
        ema20=ema20,
        ema50=ema50,
        ema_stack=ema_stack(closes),
    )


def _slope(segment: list[float]) -> float:
    if len(segment) < 2:
        return 0.0
    return (segment[-1] - segment[0]) / (len(segment) - 1)


def analyze_momentum(closes: list[float], window: int = 5) -> MomentumAnalysis:
    """Classify short-term momentum.

    ``roc`` is the percent change between the average of the last
    *window* closes and the average of the *window* closes before them.
    Direction is bullish above +0.5%, bearish below −0.5%.  Directional
    strength is ``10 × |roc|`` clamped to [10, 90]; neutral momentum
    reports 50.

    Acceleration compares the slope of the second half of the last
    ``2 × window`` closes against the first half: more than 1.5× is
    accelerating, less than 0.5× is decelerating.

    Fewer than ``2 × window`` closes yields a neutral reading.
    """
    if len(closes) < 2 * window:
        return MomentumAnalysis(direction="neutral", strength=50, acceleration="stable", roc=0.0)

    recent = closes[-window:]
    prior = closes[-2 * window:-window]
    recent_avg = sum(recent) / window
    prior_avg = sum(prior) / window
    roc = (recent_avg - prior_avg) / prior_avg * 100 if prior_avg else 0.0

    if roc > 0.5:
        direction = "bullish"
    elif roc < -0.5:
        direction = "bearish"
    else:
        direction = "neutral"

    if direction == "neutral":
        strength = 50
    else:
        strength = int(round(min(90, max(10, abs(roc) * 10))))

    first_slope = abs(_slope(prior))
    second_slope = abs(_slope(recent))
    if first_slope == 0:
        acceleration = "accelerating" if second_slope > 0 else "stable"
    elif second_slope > first_slope * 1.5:
        acceleration = "accelerating"
    elif second_slope < first_slope * 0.5:
        acceleration = "decelerating"
    else:
        acceleration = "stable"

    return MomentumAnalysis(
        direction=direction,
        strength=strength,
        acceleration=acceleration,
        roc=roc,
    )
