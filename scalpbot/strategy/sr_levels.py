"""Support/Resistance level detection from swing points — pure functions."""

from typing import Optional

from scalpbot.strategy.models import PriceLevel

LOOKBACK = 50
SWING_WINDOW = 2
CONFLUENCE_PCT = 0.002  # 0.2%
DEDUPE_PCT = 0.0015  # 0.15%
MAX_LEVELS = 3


def _find_swing_lows(values: list[float], window: int = SWING_WINDOW) -> list[float]:
    """Identify swing low prices.

    A swing low is strictly lower than the *window* values on each side.
    """
    lows: list[float] = []
    for i in range(window, len(values) - window):
        low = values[i]
        if all(
            values[i - j] > low and values[i + j] > low
            for j in range(1, window + 1)
        ):
            lows.append(low)
    return lows


def _find_swing_highs(values: list[float], window: int = SWING_WINDOW) -> list[float]:
    """Identify swing high prices.

    A swing high is strictly higher than the *window* values on each side.
    """
    highs: list[float] = []
    for i in range(window, len(values) - window):
        high = values[i]
        if all(
            values[i - j] < high and values[i + j] < high
            for j in range(1, window + 1)
        ):
            highs.append(high)
    return highs


def _confluence(price: float, values: list[float]) -> int:
    """Count the other points within 0.2% of *price*."""
    if price == 0:
        return 0
    touches = sum(1 for v in values if abs(v - price) / price <= CONFLUENCE_PCT)
    # The swing point itself is always within tolerance
    return max(touches - 1, 0)


def _strength_label(touches: int) -> str:
    if touches >= 3:
        return "strong"
    if touches == 2:
        return "moderate"
    return "weak"


def _too_close(price: float, kept: list[PriceLevel]) -> bool:
    # Relative to the larger of the two prices
    return any(
        abs(price - k.price) / max(price, k.price) <= DEDUPE_PCT
        for k in kept if k.price
    )


def _select_levels(
    candidates: list[float],
    values: list[float],
    current_price: float,
    level_type: str,
) -> list[PriceLevel]:
    """Score, de-duplicate and cap swing candidates.

    Candidates are ranked by confluence (ties go to the level nearest the
    current price); a candidate within 0.15% of an already-kept level is
    dropped.
    """
    scored = [
        (round(price, 2), _confluence(price, values))
        for price in candidates
    ]
    scored.sort(key=lambda s: (-s[1], abs(s[0] - current_price)))

    kept: list[PriceLevel] = []
    for price, touches in scored:
        if len(kept) >= MAX_LEVELS:
            break
        if _too_close(price, kept):
            continue
        kept.append(
            PriceLevel(price=price, strength=_strength_label(touches), type=level_type)
        )
    return kept


def _add_vwap_level(
    levels: list[PriceLevel],
    vwap: Optional[float],
) -> list[PriceLevel]:
    if vwap is None or vwap <= 0 or len(levels) >= MAX_LEVELS:
        return levels
    price = round(vwap, 2)
    if _too_close(price, levels):
        return levels
    return levels + [PriceLevel(price=price, strength="moderate", type="vwap")]


def find_support_levels(
    lows: list[float],
    current_price: float,
    vwap: Optional[float] = None,
    lookback: int = LOOKBACK,
) -> list[PriceLevel]:
    """Detect up to three support levels below *current_price*.

    Args:
        lows: Bar lows, oldest-first.
        current_price: Latest tradable price.
        vwap: Optional VWAP, added as a level when it sits below price
            and there is room.
        lookback: Number of most-recent bars to analyse.

    Returns:
        Levels ordered nearest-first (descending price).
    """
    recent = lows[-lookback:]
    candidates = [p for p in _find_swing_lows(recent) if p < current_price]
    levels = _select_levels(candidates, recent, current_price, "swing-low")
    if vwap is not None and vwap < current_price:
        levels = _add_vwap_level(levels, vwap)
    return sorted(levels, key=lambda l: -l.price)


def find_resistance_levels(
    highs: list[float],
    current_price: float,
    vwap: Optional[float] = None,
    lookback: int = LOOKBACK,
) -> list[PriceLevel]:
    """Detect up to three resistance levels above *current_price*.

    Mirror of :func:`find_support_levels`; ordered nearest-first
    (ascending price).
    """
    recent = highs[-lookback:]
    candidates = [p for p in _find_swing_highs(recent) if p > current_price]
    levels = _select_levels(candidates, recent, current_price, "swing-high")
    if vwap is not None and vwap > current_price:
        levels = _add_vwap_level(levels, vwap)
    return sorted(levels, key=lambda l: l.price)
