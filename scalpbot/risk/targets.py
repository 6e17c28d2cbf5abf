"""Take-profit and stop-loss calculation — pure math, no I/O.

Style-based approach (analysis path):
    TP1/TP2/SL start from the style's percentages and are widened by a
    volatility allowance derived from ATR, capped at 2% of entry.

Fixed-percentage approach (trade entry path):
    TP1 +0.6%, TP2 +1.2%, SL −0.75% from entry, mirrored for PUT.

The two paths are intentionally separate functions.
"""

from dataclasses import dataclass

from scalpbot.models.style_config import TradingStyleConfig

MAX_ATR_MULTIPLIER = 0.02

FIXED_TP1_PCT = 0.6
FIXED_TP2_PCT = 1.2
FIXED_SL_PCT = 0.75


@dataclass(frozen=True)
class TargetSet:
    """ATR-adjusted targets with reward-to-risk figures."""

    entry: float
    tp1: float
    tp2: float
    sl: float
    tp1_percent: str
    tp2_percent: str
    sl_percent: str
    rr1: float
    rr2: float
    risk_amount: float
    reward1_amount: float
    reward2_amount: float
    hold_time: str
    min_rr: float


@dataclass(frozen=True)
class FixedTargets:
    """Targets from the fixed-percentage entry path."""

    tp1: float
    tp2: float
    sl: float


def _check_direction(direction: str) -> str:
    direction = direction.upper()
    if direction not in ("CALL", "PUT"):
        raise ValueError(f"direction must be 'CALL' or 'PUT', got '{direction}'")
    return direction


def compute_targets(
    entry_price: float,
    style: TradingStyleConfig,
    atr: float,
    direction: str = "CALL",
) -> TargetSet:
    """Calculate TP1, TP2 and SL for a style with an ATR allowance.

    Logic (CALL; PUT mirrors every sign):
        1. tp1 = entry × (1 + tp1_pct), tp2 = entry × (1 + tp2_pct),
           sl = entry × (1 − sl_pct).
        2. atr_multiplier = min(atr / entry, 0.02).
        3. tp1 += entry × m × 0.5, tp2 += entry × m, sl −= entry × m × 0.3.
        4. rr = reward / risk using |tp − entry| and |entry − sl|.

    Money values are rounded to 2 decimals, percentages are 2-decimal
    strings of the distance from entry.  A non-positive entry yields no
    ATR allowance and zero percentages.  Any direction other than
    ``"PUT"`` is treated as a CALL.
    """
    sign = -1.0 if direction.upper() == "PUT" else 1.0

    tp1 = entry_price * (1 + sign * style.tp1_pct / 100)
    tp2 = entry_price * (1 + sign * style.tp2_pct / 100)
    sl = entry_price * (1 - sign * style.sl_pct / 100)

    if entry_price > 0 and atr > 0:
        atr_multiplier = min(atr / entry_price, MAX_ATR_MULTIPLIER)
        tp1 += sign * entry_price * atr_multiplier * 0.5
        tp2 += sign * entry_price * atr_multiplier
        sl -= sign * entry_price * atr_multiplier * 0.3

    risk = abs(entry_price - sl)
    reward1 = abs(tp1 - entry_price)
    reward2 = abs(tp2 - entry_price)
    rr1 = reward1 / risk if risk > 0 else 0.0
    rr2 = reward2 / risk if risk > 0 else 0.0

    def _pct(distance: float) -> str:
        pct = distance / entry_price * 100 if entry_price > 0 else 0.0
        return f"{pct:.2f}"

    return TargetSet(
        entry=round(entry_price, 2),
        tp1=round(tp1, 2),
        tp2=round(tp2, 2),
        sl=round(sl, 2),
        tp1_percent=_pct(reward1),
        tp2_percent=_pct(reward2),
        sl_percent=_pct(risk),
        rr1=round(rr1, 2),
        rr2=round(rr2, 2),
        risk_amount=round(risk, 2),
        reward1_amount=round(reward1, 2),
        reward2_amount=round(reward2, 2),
        hold_time=style.hold_time,
        min_rr=style.min_rr,
    )


def compute_fixed_targets(entry_price: float, direction: str) -> FixedTargets:
    """Calculate the fixed-percentage targets used when a trade is entered.

    - **CALL**: TP1 = entry × 1.006, TP2 = entry × 1.012, SL = entry × 0.9925
    - **PUT**:  TP1 = entry × 0.994, TP2 = entry × 0.988, SL = entry × 1.0075

    Each level is rounded to 2 decimal places.

    Raises:
        ValueError: If *direction* is not ``"CALL"`` or ``"PUT"``.
    """
    if _check_direction(direction) == "CALL":
        tp1 = entry_price * (1 + FIXED_TP1_PCT / 100)
        tp2 = entry_price * (1 + FIXED_TP2_PCT / 100)
        sl = entry_price * (1 - FIXED_SL_PCT / 100)
    else:
        tp1 = entry_price * (1 - FIXED_TP1_PCT / 100)
        tp2 = entry_price * (1 - FIXED_TP2_PCT / 100)
        sl = entry_price * (1 + FIXED_SL_PCT / 100)

    return FixedTargets(tp1=round(tp1, 2), tp2=round(tp2, 2), sl=round(sl, 2))
