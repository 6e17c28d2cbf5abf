"""Tests for scalpbot.risk.targets — ATR-adjusted and fixed-percentage targets."""

import pytest

from scalpbot.models.style_config import TRADING_STYLES, get_style_config
from scalpbot.risk.targets import compute_fixed_targets, compute_targets

SCALPING = TRADING_STYLES["scalping"]


class TestComputeTargets:
    def test_scalping_without_atr(self):
        t = compute_targets(100.0, SCALPING, atr=0)
        assert t.tp1 == 100.30
        assert t.tp2 == 100.60
        assert t.sl == 99.50
        assert t.rr1 == pytest.approx(0.60)
        assert t.rr2 == pytest.approx(1.20)
        assert (t.tp1_percent, t.tp2_percent, t.sl_percent) == ("0.30", "0.60", "0.50")
        assert t.hold_time == "15-30 minutes"
        assert t.min_rr == 1.2

    def test_atr_widens_levels(self):
        # m = 1 / 100 = 0.01 → tp1 +0.5, tp2 +1.0, sl −0.3
        t = compute_targets(100.0, SCALPING, atr=1.0)
        assert t.tp1 == pytest.approx(100.80)
        assert t.tp2 == pytest.approx(101.60)
        assert t.sl == pytest.approx(99.20)
        assert t.risk_amount == pytest.approx(0.80)
        assert t.rr1 == pytest.approx(1.0)
        assert t.rr2 == pytest.approx(2.0)

    def test_atr_multiplier_capped(self):
        capped = compute_targets(100.0, SCALPING, atr=50.0)
        at_cap = compute_targets(100.0, SCALPING, atr=2.0)
        assert capped == at_cap

    def test_put_mirrors_call(self):
        t = compute_targets(100.0, SCALPING, atr=1.0, direction="PUT")
        assert t.tp1 == pytest.approx(99.20)
        assert t.tp2 == pytest.approx(98.40)
        assert t.sl == pytest.approx(100.80)
        assert t.rr1 == pytest.approx(1.0)

    def test_non_positive_entry_never_raises(self):
        t = compute_targets(0.0, SCALPING, atr=1.0)
        assert t.rr1 == 0.0
        assert t.rr2 == 0.0
        assert t.tp1_percent == "0.00"

    def test_swing_style(self):
        t = compute_targets(200.0, get_style_config("swing"), atr=0)
        assert t.tp1 == 206.0
        assert t.tp2 == 212.0
        assert t.sl == 196.0
        assert t.hold_time == "2-10 days"


class TestFixedTargets:
    def test_call(self):
        t = compute_fixed_targets(585.50, "CALL")
        assert t.tp1 == 589.01
        assert t.tp2 == 592.53
        assert t.sl == 581.11

    def test_put(self):
        t = compute_fixed_targets(100.0, "PUT")
        assert t.tp1 == 99.40
        assert t.tp2 == 98.80
        assert t.sl == 100.75

    def test_direction_case_insensitive(self):
        assert compute_fixed_targets(100.0, "call") == compute_fixed_targets(100.0, "CALL")

    def test_invalid_direction(self):
        with pytest.raises(ValueError, match="direction"):
            compute_fixed_targets(100.0, "LONG")


class TestStyleConfig:
    def test_aliases(self):
        assert get_style_config("day-trading").name == "daytrading"
        assert get_style_config("day_trading").name == "daytrading"
        assert get_style_config("SCALPING").name == "scalping"

    def test_unknown_style(self):
        with pytest.raises(KeyError, match="Available: scalping, daytrading, swing"):
            get_style_config("position")

    def test_style_table(self):
        day = TRADING_STYLES["daytrading"]
        assert (day.htf_interval, day.ltf_interval, day.lookback_days) == ("15min", "5min", 10)
        assert (day.tp1_pct, day.tp2_pct, day.sl_pct, day.min_rr) == (0.8, 1.5, 0.6, 1.5)
