"""ScalpBot — trade monitor (per-symbol polling loops).

Each tracked trade gets its own asyncio task that polls the latest quote,
applies it to the trade's lifecycle and forwards any alerts.  Ticks for
one symbol run strictly in sequence: the next sleep only starts after
the current evaluation has finished.
"""

import asyncio
import inspect
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from scalpbot.repos.trade_store import TradeStore
from scalpbot.trading.lifecycle import TIME_STOP_MINUTES, evaluate_price
from scalpbot.trading.models import TickResult, Trade, TradeEvent

logger = logging.getLogger("scalpbot.monitor")

EventCallback = Callable[[TradeEvent], Any]

_MAX_RECENT_EVENTS = 50


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TradeMonitor:
    """Owns one polling task per tracked symbol.

    Args:
        store: The shared ``TradeStore``.
        broker: A ``TradierClient`` (or any object with an async
            ``fetch_quote(symbol)``).
        on_event: Optional callback, sync or async, called for every alert.
        poll_interval: Seconds between ticks for one symbol.
        time_stop_minutes: Minutes after entry at which the time stop fires.
        clock: Returns the current time; defaults to ``datetime.now(UTC)``.
    """

    def __init__(
        self,
        store: TradeStore,
        broker,
        on_event: Optional[EventCallback] = None,
        poll_interval: float = 15,
        time_stop_minutes: float = TIME_STOP_MINUTES,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._broker = broker
        self._on_event = on_event
        self._poll_interval = poll_interval
        self._time_stop_minutes = time_stop_minutes
        self._clock = clock or _utc_now
        self._tasks: dict[str, asyncio.Task] = {}
        self._events: deque[TradeEvent] = deque(maxlen=_MAX_RECENT_EVENTS)

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def watching(self) -> list[str]:
        """Symbols with a live monitoring task."""
        return [s for s, t in self._tasks.items() if not t.done()]

    def is_watching(self, symbol: str) -> bool:
        task = self._tasks.get(symbol.upper())
        return task is not None and not task.done()

    def start(self, trade: Trade) -> asyncio.Task:
        """Start monitoring *trade*, cancelling any previous task for its symbol.

        Must be called from within a running event loop.
        """
        symbol = trade.symbol.upper()
        self.stop(symbol)
        task = asyncio.create_task(self.run(trade), name=f"monitor-{symbol}")
        self._tasks[symbol] = task
        task.add_done_callback(lambda t, s=symbol: self._forget(s, t))
        logger.info(
            "Monitoring %s %s (every %ss, time stop %s min).",
            symbol, trade.direction, self._poll_interval, self._time_stop_minutes,
        )
        return task

    def stop(self, symbol: str) -> bool:
        """Cancel the monitoring task for *symbol*.  Returns ``True`` if one ran."""
        task = self._tasks.pop(symbol.upper(), None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("Stopped monitoring %s.", symbol.upper())
        return True

    def stop_all(self) -> None:
        """Cancel every monitoring task."""
        for symbol in list(self._tasks):
            self.stop(symbol)

    async def shutdown(self) -> None:
        """Cancel every task and wait for them to unwind."""
        tasks = list(self._tasks.values())
        self.stop_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def recent_events(self, limit: int = 20) -> list[TradeEvent]:
        """Most recent alerts, newest first."""
        events = list(self._events)[-limit:]
        events.reverse()
        return events

    # ── Polling loop ─────────────────────────────────────────────────────

    async def run(self, trade: Trade, max_ticks: int = 0) -> list[TradeEvent]:
        """Poll until the trade is terminal, closed or replaced.

        Args:
            trade: The trade to watch.  The loop ends as soon as the store
                no longer holds this exact object.
            max_ticks: Stop after this many ticks (0 = unlimited).

        Returns:
            Every event raised while this loop ran.
        """
        symbol = trade.symbol.upper()
        raised: list[TradeEvent] = []
        tick = 0

        while True:
            if self._store.get(symbol) is not trade:
                logger.info("%s no longer tracked — monitor exiting.", symbol)
                break

            tick += 1
            result = await self.check_once(trade)
            raised.extend(result.events)

            if result.terminal:
                logger.info("%s reached a terminal state — monitor exiting.", symbol)
                break
            if max_ticks > 0 and tick >= max_ticks:
                break

            await asyncio.sleep(self._poll_interval)

        return raised

    async def check_once(self, trade: Trade) -> TickResult:
        """Run one tick for *trade*.

        A failed quote fetch is logged and leaves every flag untouched; the
        next tick retries.
        """
        symbol = trade.symbol.upper()
        try:
            quote = await self._broker.fetch_quote(symbol)
        except Exception as exc:
            logger.error("Error monitoring %s: %s", symbol, exc)
            return TickResult()

        # Closed or replaced while the quote was in flight
        if self._store.get(symbol) is not trade:
            return TickResult(terminal=True)

        result = evaluate_price(
            trade, quote.last, self._clock(), self._time_stop_minutes,
        )
        for event in result.events:
            await self._emit(event)
        return result

    # ── Internals ────────────────────────────────────────────────────────

    async def _emit(self, event: TradeEvent) -> None:
        logger.info(
            "%s %s %s @ %.2f", event.kind, event.symbol, event.direction, event.price,
        )
        self._events.append(event)
        if self._on_event is None:
            return
        try:
            outcome = self._on_event(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            logger.error("Alert delivery failed for %s %s: %s", event.kind, event.symbol, exc)

    def _forget(self, symbol: str, task: asyncio.Task) -> None:
        if self._tasks.get(symbol) is task:
            del self._tasks[symbol]
