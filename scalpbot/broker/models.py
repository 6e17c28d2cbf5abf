"""Broker data models — typed representations of Tradier market data objects."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Bar:
    """A single OHLCV bar."""

    timestamp: str
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass(frozen=True)
class Quote:
    """Latest quote snapshot for a symbol.

    ``last`` already carries the ``prev_close`` fallback applied by the
    client when the market is closed and no last trade is reported.
    """

    symbol: str
    last: float
    bid: float = 0.0
    ask: float = 0.0
    volume: int = 0
    change: float = 0.0
    change_percent: float = 0.0
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    prev_close: float = 0.0

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "last": self.last,
            "bid": self.bid,
            "ask": self.ask,
            "volume": self.volume,
            "change": self.change,
            "change_percent": self.change_percent,
            "high": self.high,
            "low": self.low,
            "open": self.open,
            "prev_close": self.prev_close,
        }
