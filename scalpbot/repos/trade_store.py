"""Trade store — in-memory registry of tracked trades, one per symbol."""

import threading
from typing import Optional

from scalpbot.trading.models import Trade


class TradeStore:
    """Owned registry of active trades keyed by symbol.

    Every read and write holds the same lock, so a listing never sees a
    half-applied insert, replace or delete.  Symbols are stored upper-case.
    """

    def __init__(self) -> None:
        self._trades: dict[str, Trade] = {}
        self._lock = threading.Lock()

    # ── Write ────────────────────────────────────────────────────────────

    def put(self, trade: Trade) -> Optional[Trade]:
        """Insert *trade*, replacing any trade for the same symbol.

        Returns the replaced trade, or ``None``.
        """
        symbol = trade.symbol.upper()
        with self._lock:
            previous = self._trades.get(symbol)
            self._trades[symbol] = trade
        return previous

    def remove(self, symbol: str) -> Optional[Trade]:
        """Delete the trade for *symbol* and return it (``None`` if absent)."""
        with self._lock:
            return self._trades.pop(symbol.upper(), None)

    def clear(self) -> None:
        with self._lock:
            self._trades.clear()

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, symbol: str) -> Optional[Trade]:
        with self._lock:
            return self._trades.get(symbol.upper())

    def list_active(self) -> list[Trade]:
        """Return a snapshot list of tracked trades in insertion order."""
        with self._lock:
            return list(self._trades.values())

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return symbol.upper() in self._trades

    def __len__(self) -> int:
        with self._lock:
            return len(self._trades)
