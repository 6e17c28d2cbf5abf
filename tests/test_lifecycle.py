"""Tests for scalpbot.trading.lifecycle — the per-tick trade state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from scalpbot.risk.targets import compute_fixed_targets
from scalpbot.trading.lifecycle import evaluate_price, pnl_percent
from scalpbot.trading.models import Trade

ENTRY_TIME = datetime(2025, 1, 10, 15, 0, tzinfo=timezone.utc)


def _make_trade(direction: str = "CALL", entry: float = 585.50) -> Trade:
    targets = compute_fixed_targets(entry, direction)
    return Trade(
        symbol="SPY",
        direction=direction,
        entry_price=entry,
        entry_time=ENTRY_TIME,
        tp1=targets.tp1,
        tp2=targets.tp2,
        sl=targets.sl,
    )


def _at(minutes: float) -> datetime:
    return ENTRY_TIME + timedelta(minutes=minutes)


class TestCallLifecycle:
    def test_tp1_then_sl(self):
        trade = _make_trade()

        result = evaluate_price(trade, 590.0, _at(1))
        assert [e.kind for e in result.events] == ["TP1"]
        assert trade.tp1_hit is True
        assert trade.tp2_hit is False
        assert trade.sl_hit is False
        assert result.terminal is False

        result = evaluate_price(trade, 580.0, _at(2))
        assert [e.kind for e in result.events] == ["SL"]
        assert trade.sl_hit is True
        assert result.terminal is True

    def test_tp1_fires_once(self):
        trade = _make_trade()
        evaluate_price(trade, 590.0, _at(1))
        result = evaluate_price(trade, 590.5, _at(2))
        assert result.events == []

    def test_gap_through_both_targets(self):
        trade = _make_trade()
        result = evaluate_price(trade, 600.0, _at(1))
        assert [e.kind for e in result.events] == ["TP1", "TP2"]
        assert result.terminal is False

    def test_no_event_inside_range(self):
        trade = _make_trade()
        result = evaluate_price(trade, 586.0, _at(5))
        assert result.events == []
        assert result.terminal is False

    def test_level_touch_counts(self):
        trade = _make_trade()
        assert [e.kind for e in evaluate_price(trade, trade.tp1, _at(1)).events] == ["TP1"]

    def test_event_payload(self):
        trade = _make_trade()
        event = evaluate_price(trade, 590.0, _at(3)).events[0]
        assert event.symbol == "SPY"
        assert event.direction == "CALL"
        assert event.price == 590.0
        assert event.timestamp == _at(3)
        assert event.to_dict()["timestamp"] == _at(3).isoformat()


class TestPutLifecycle:
    def test_put_targets_below_entry(self):
        trade = _make_trade("PUT", 100.0)
        result = evaluate_price(trade, 99.3, _at(1))
        assert [e.kind for e in result.events] == ["TP1"]

    def test_put_stop_above_entry(self):
        trade = _make_trade("PUT", 100.0)
        result = evaluate_price(trade, 100.8, _at(1))
        assert [e.kind for e in result.events] == ["SL"]
        assert result.terminal is True


class TestTimeStop:
    def test_time_stop_is_terminal(self):
        trade = _make_trade()
        result = evaluate_price(trade, 586.0, _at(30))
        assert [e.kind for e in result.events] == ["TIME_STOP"]
        assert trade.time_stopped is True
        assert result.terminal is True

    def test_time_stop_after_targets(self):
        trade = _make_trade()
        evaluate_price(trade, 593.0, _at(10))
        result = evaluate_price(trade, 593.0, _at(31))
        assert [e.kind for e in result.events] == ["TIME_STOP"]

    def test_custom_time_stop(self):
        trade = _make_trade()
        assert evaluate_price(trade, 586.0, _at(5), time_stop_minutes=5).terminal is True

    def test_terminal_trade_raises_nothing(self):
        trade = _make_trade()
        evaluate_price(trade, 580.0, _at(1))
        result = evaluate_price(trade, 600.0, _at(40))
        assert result.events == []
        assert result.terminal is True
        assert trade.tp1_hit is False


class TestPnL:
    def test_call_pnl(self):
        assert pnl_percent(_make_trade("CALL", 100.0), 101.0) == pytest.approx(1.0)

    def test_put_pnl_is_inverted(self):
        assert pnl_percent(_make_trade("PUT", 100.0), 101.0) == pytest.approx(-1.0)

    def test_rounded(self):
        assert pnl_percent(_make_trade("CALL", 585.50), 590.0) == 0.77
