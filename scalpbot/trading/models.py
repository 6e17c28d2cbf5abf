"""Trade tracking models — user-declared trades and the alerts they raise."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

EventKind = Literal["TP1", "TP2", "SL", "TIME_STOP"]


@dataclass
class Trade:
    """An open trade tracked against fixed TP/SL levels.

    Mutable: the hit flags flip to ``True`` as the monitor observes each
    transition, and never flip back.
    """

    symbol: str
    direction: str  # "CALL" or "PUT"
    entry_price: float
    entry_time: datetime
    tp1: float
    tp2: float
    sl: float
    tp1_hit: bool = False
    tp2_hit: bool = False
    sl_hit: bool = False
    time_stopped: bool = False

    @property
    def is_terminal(self) -> bool:
        """``True`` once the stop-loss or the time stop has fired."""
        return self.sl_hit or self.time_stopped

    def minutes_elapsed(self, now: datetime) -> float:
        return (now - self.entry_time).total_seconds() / 60

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "direction": self.direction,
            "entry_price": self.entry_price,
            "entry_time": self.entry_time.isoformat(),
            "tp1": self.tp1,
            "tp2": self.tp2,
            "sl": self.sl,
            "tp1_hit": self.tp1_hit,
            "tp2_hit": self.tp2_hit,
            "sl_hit": self.sl_hit,
            "time_stopped": self.time_stopped,
        }


@dataclass(frozen=True)
class TradeEvent:
    """An alert raised by a trade transition."""

    kind: EventKind
    symbol: str
    direction: str
    price: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "symbol": self.symbol,
            "direction": self.direction,
            "price": self.price,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class TradeCheck:
    """A trade together with its live price and direction-aware P/L."""

    trade: Trade
    current_price: float
    pnl_percent: float
    minutes_elapsed: float = 0.0
    minutes_left: float = 0.0

    def to_dict(self) -> dict:
        return {
            **self.trade.to_dict(),
            "current_price": self.current_price,
            "pnl_percent": self.pnl_percent,
            "minutes_elapsed": self.minutes_elapsed,
            "minutes_left": self.minutes_left,
        }


@dataclass(frozen=True)
class TickResult:
    """Events produced by one price evaluation."""

    events: list[TradeEvent] = field(default_factory=list)
    terminal: bool = False
