"""TradeDesk — the trade command surface (enter, close, list, check).

Wires the ``TradeStore``, the ``TradeMonitor`` and the market data client
together.  The desk owns its store and monitor, so several desks can live
in one process without sharing state.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Optional

from scalpbot.monitor import EventCallback, TradeMonitor
from scalpbot.repos.trade_store import TradeStore
from scalpbot.risk.targets import compute_fixed_targets
from scalpbot.trading.lifecycle import TIME_STOP_MINUTES, pnl_percent
from scalpbot.trading.models import Trade, TradeCheck, TradeEvent

logger = logging.getLogger("scalpbot.trade_desk")

_SYMBOL_RE = re.compile(r"^[A-Z][A-Z0-9.]{0,9}$")


def normalize_symbol(symbol: str) -> str:
    """Upper-case and validate a ticker symbol.

    Raises ``ValueError`` for anything that is not a plausible ticker.
    """
    cleaned = (symbol or "").strip().upper()
    if not _SYMBOL_RE.match(cleaned):
        raise ValueError(f"Invalid symbol: '{symbol}'")
    return cleaned


def normalize_direction(direction: str) -> str:
    cleaned = (direction or "").strip().upper()
    if cleaned not in ("CALL", "PUT"):
        raise ValueError(f"direction must be 'CALL' or 'PUT', got '{direction}'")
    return cleaned


class TradeDesk:
    """Command handlers for user-declared trades.

    Args:
        broker: ``TradierClient`` (or duck-type with ``fetch_quote``).
        poll_interval: Seconds between monitor ticks.
        time_stop_minutes: Minutes until the time stop fires.
        on_event: Optional alert callback forwarded to the monitor.
        clock: Returns the current time; defaults to ``datetime.now(UTC)``.
    """

    def __init__(
        self,
        broker,
        poll_interval: float = 15,
        time_stop_minutes: float = TIME_STOP_MINUTES,
        on_event: Optional[EventCallback] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._broker = broker
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._time_stop_minutes = time_stop_minutes
        self.store = TradeStore()
        self.monitor = TradeMonitor(
            store=self.store,
            broker=broker,
            on_event=on_event,
            poll_interval=poll_interval,
            time_stop_minutes=time_stop_minutes,
            clock=self._clock,
        )

    # ── Commands ─────────────────────────────────────────────────────────

    async def enter(
        self,
        symbol: str,
        direction: str,
        entry_price: float,
        monitor: bool = True,
    ) -> Trade:
        """Track a new trade and start monitoring it.

        The symbol is validated with a quote fetch first, so an unknown
        symbol raises ``InvalidSymbolError`` and nothing is stored.  An
        existing trade for the same symbol is replaced.

        Raises:
            ValueError: On a malformed symbol, direction or entry price.
        """
        symbol = normalize_symbol(symbol)
        direction = normalize_direction(direction)
        if entry_price <= 0:
            raise ValueError(f"entry_price must be positive, got {entry_price}")

        quote = await self._broker.fetch_quote(symbol)

        targets = compute_fixed_targets(entry_price, direction)
        trade = Trade(
            symbol=symbol,
            direction=direction,
            entry_price=entry_price,
            entry_time=self._clock(),
            tp1=targets.tp1,
            tp2=targets.tp2,
            sl=targets.sl,
        )

        previous = self.store.put(trade)
        if previous is not None:
            logger.info("Replacing open %s %s trade.", symbol, previous.direction)
        logger.info(
            "Trade added: %s %s @ %.2f (TP1 %.2f, TP2 %.2f, SL %.2f, last %.2f)",
            symbol, direction, entry_price, trade.tp1, trade.tp2, trade.sl, quote.last,
        )

        if monitor:
            self.monitor.start(trade)
        return trade

    def close(self, symbol: str) -> bool:
        """Stop tracking *symbol*.  Returns ``False`` if nothing was tracked."""
        symbol = symbol.strip().upper()
        removed = self.store.remove(symbol)
        self.monitor.stop(symbol)
        if removed is None:
            return False
        logger.info("Trade removed: %s %s.", symbol, removed.direction)
        return True

    def list_active(self) -> list[Trade]:
        return self.store.list_active()

    async def check_one(self, symbol: str) -> Optional[TradeCheck]:
        """Fetch the live price for a tracked trade.

        Returns ``None`` if *symbol* is not tracked.  Market data errors
        propagate to the caller.

        ``pnl_percent`` is direction-aware: a PUT reports a gain when the
        price falls below entry, so it is the negated raw price change.
        """
        trade = self.store.get(symbol.strip().upper())
        if trade is None:
            return None

        quote = await self._broker.fetch_quote(trade.symbol)
        elapsed = trade.minutes_elapsed(self._clock())
        return TradeCheck(
            trade=trade,
            current_price=quote.last,
            pnl_percent=pnl_percent(trade, quote.last),
            minutes_elapsed=round(elapsed, 1),
            minutes_left=round(max(0.0, self._time_stop_minutes - elapsed), 1),
        )

    def recent_events(self, limit: int = 20) -> list[TradeEvent]:
        return self.monitor.recent_events(limit)

    def stop_all(self) -> None:
        """Cancel every monitor task; tracked trades stay in the store."""
        self.monitor.stop_all()

    async def shutdown(self) -> None:
        """Stop every monitor task."""
        await self.monitor.shutdown()
