"""Trade lifecycle — the per-tick state machine for a tracked trade.

States are the trade's flags: ``OPEN → {TP1, TP2, SL, TIME_STOP}``.
TP1 and TP2 keep the trade monitored; SL and the time stop are terminal.
Each flag is checked before its alert is raised, so every transition
fires exactly once.
"""

from datetime import datetime

from scalpbot.trading.models import TickResult, Trade, TradeEvent

TIME_STOP_MINUTES = 30


def _favourable(trade: Trade, price: float, level: float) -> bool:
    if trade.direction == "CALL":
        return price >= level
    return price <= level


def _adverse(trade: Trade, price: float, level: float) -> bool:
    if trade.direction == "CALL":
        return price <= level
    return price >= level


def evaluate_price(
    trade: Trade,
    price: float,
    now: datetime,
    time_stop_minutes: float = TIME_STOP_MINUTES,
) -> TickResult:
    """Apply one observed price to *trade*, mutating its flags in place.

    Evaluation order: TP1 → TP2 → SL → time stop.

    Args:
        trade: The tracked trade (mutated).
        price: Latest observed price.
        now: Observation time, comparable with ``trade.entry_time``.
        time_stop_minutes: Minutes after entry at which the time stop fires.

    Returns:
        ``TickResult`` with the events raised on this tick and whether
        monitoring should stop.  A trade that is already terminal raises
        nothing and reports ``terminal=True``.
    """
    if trade.is_terminal:
        return TickResult(events=[], terminal=True)

    events: list[TradeEvent] = []

    def _raise(kind: str) -> None:
        events.append(
            TradeEvent(
                kind=kind,
                symbol=trade.symbol,
                direction=trade.direction,
                price=price,
                timestamp=now,
            )
        )

    if not trade.tp1_hit and _favourable(trade, price, trade.tp1):
        trade.tp1_hit = True
        _raise("TP1")

    if not trade.tp2_hit and _favourable(trade, price, trade.tp2):
        trade.tp2_hit = True
        _raise("TP2")

    if not trade.sl_hit and _adverse(trade, price, trade.sl):
        trade.sl_hit = True
        _raise("SL")

    if not trade.time_stopped and trade.minutes_elapsed(now) >= time_stop_minutes:
        trade.time_stopped = True
        _raise("TIME_STOP")

    return TickResult(events=events, terminal=trade.is_terminal)


def pnl_percent(trade: Trade, price: float) -> float:
    """Direction-aware P/L in percent of entry, rounded to 2 decimals."""
    if trade.entry_price <= 0:
        return 0.0
    change = (price - trade.entry_price) / trade.entry_price * 100
    if trade.direction == "PUT":
        change = -change
    return round(change, 2)
