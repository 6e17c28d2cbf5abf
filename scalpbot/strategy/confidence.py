"""Rule-based confidence scoring, trade gating and advisory filters.

Everything here is deterministic and never raises: every snapshot yields
a score and every score yields a decision.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from scalpbot.strategy.models import IndicatorSnapshot

BLOCK_BELOW = 65
FULL_FROM = 75
VWAP_EXTENSION_PCT = 0.006  # 0.6%


@dataclass(frozen=True)
class TradeDecision:
    """Outcome of the confidence gate."""

    action: Literal["blocked", "reduced", "full"]
    tradeable: bool
    reason: str


def compute_confidence(snapshot: IndicatorSnapshot) -> int:
    """Score a snapshot from 0 to 100.

    Rule table (additive, capped at 100):
        +20  trend direction is up or down
        +20  EMA stack is bullish or bearish
        +15  momentum is bullish or bearish
        +15  volume profile high (+8 when above-average)
        +10  RSI in (50, 70) or (30, 50)
        +10  Stoch RSI in (20, 80)
    """
    score = 0

    if snapshot.trend.direction in ("uptrend", "downtrend"):
        score += 20
    if snapshot.trend.ema_stack in ("bullish", "bearish"):
        score += 20
    if snapshot.momentum.direction in ("bullish", "bearish"):
        score += 15

    profile = snapshot.volume_analysis.profile
    if profile == "high":
        score += 15
    elif profile == "above-average":
        score += 8

    if 50 < snapshot.rsi < 70 or 30 < snapshot.rsi < 50:
        score += 10
    if 20 < snapshot.stoch_rsi < 80:
        score += 10

    return min(score, 100)


def decide_trade(
    confidence: int,
    style: str,
    ltf_snapshot: Optional[IndicatorSnapshot],
) -> TradeDecision:
    """Gate a trade suggestion on confidence.

    - Scalping without a lower-timeframe snapshot is always blocked.
    - Below 65: blocked, bias only.
    - 65–74: allowed with reduced size.
    - 75 and above: full signal.
    """
    if style == "scalping" and ltf_snapshot is None:
        return TradeDecision(action="blocked", tradeable=False, reason="no_ltf_data")
    if confidence < BLOCK_BELOW:
        return TradeDecision(action="blocked", tradeable=False, reason="low_confidence")
    if confidence < FULL_FROM:
        return TradeDecision(action="reduced", tradeable=True, reason="moderate_confidence")
    return TradeDecision(action="full", tradeable=True, reason="high_confidence")


def is_vwap_extended(price: float, vwap: float, style: str) -> bool:
    """Return ``True`` when a scalp entry would be chasing price away from VWAP."""
    if style != "scalping" or vwap <= 0:
        return False
    return abs(price - vwap) / vwap > VWAP_EXTENSION_PCT


def alignment_score(htf: IndicatorSnapshot, ltf: Optional[IndicatorSnapshot]) -> int:
    """Advisory HTF/LTF agreement score.

    +2 when the HTF trend matches the LTF momentum direction, −3 when they
    oppose each other, +1 when the LTF Stoch RSI sits in an extreme
    (< 20 or > 80).  Returns 0 without an LTF snapshot.
    """
    if ltf is None:
        return 0

    score = 0
    trend = htf.trend.direction
    momentum = ltf.momentum.direction
    if (trend, momentum) in (("uptrend", "bullish"), ("downtrend", "bearish")):
        score += 2
    elif (trend, momentum) in (("uptrend", "bearish"), ("downtrend", "bullish")):
        score -= 3

    if ltf.stoch_rsi < 20 or ltf.stoch_rsi > 80:
        score += 1

    return score
