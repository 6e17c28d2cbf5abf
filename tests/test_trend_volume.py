"""Tests for scalpbot.strategy.trend and scalpbot.strategy.volume."""

import pytest

from scalpbot.strategy.trend import analyze_momentum, detect_trend, ema_stack
from scalpbot.strategy.volume import analyze_volume


def _ohlc(closes: list[float], spread: float = 0.5):
    highs = [c + spread for c in closes]
    lows = [c - spread for c in closes]
    return highs, lows, closes


# ── Trend ────────────────────────────────────────────────────────────────


class TestDetectTrend:
    def test_strong_uptrend(self):
        closes = [100.0 + i for i in range(60)]
        result = detect_trend(*_ohlc(closes))
        assert result.direction == "uptrend"
        assert result.strength == "strong"
        assert result.ema_stack == "bullish"
        assert closes[-1] > result.ema20 > result.ema50

    def test_strong_downtrend(self):
        closes = [200.0 - i for i in range(60)]
        result = detect_trend(*_ohlc(closes))
        assert result.direction == "downtrend"
        assert result.strength == "strong"
        assert result.ema_stack == "bearish"

    def test_flat_is_sideways(self):
        result = detect_trend(*_ohlc([100.0] * 60))
        assert result.direction == "sideways"
        assert result.strength == "weak"
        assert result.ema_stack == "mixed"

    def test_short_history_is_moderate(self):
        # EMA50 falls back to the last close, so the strong condition fails
        closes = [100.0 + i for i in range(30)]
        result = detect_trend(*_ohlc(closes))
        assert result.direction == "uptrend"
        assert result.strength == "moderate"
        assert result.ema50 == closes[-1]
        assert result.ema_stack == "mixed"

    def test_pullback_breaks_structure(self):
        closes = [100.0 + i for i in range(60)]
        closes[-2] = closes[-1] + 2  # lower high on the last bar
        result = detect_trend(*_ohlc(closes))
        assert result.direction == "uptrend"
        assert result.strength == "moderate"

    def test_empty(self):
        result = detect_trend([], [], [])
        assert result.direction == "sideways"
        assert result.strength == "weak"
        assert result.ema20 == 0.0


def test_ema_stack_needs_50_points():
    assert ema_stack([float(v) for v in range(49)]) == "mixed"
    assert ema_stack([float(v) for v in range(50)]) == "bullish"


# ── Momentum ─────────────────────────────────────────────────────────────


class TestMomentum:
    def test_short_input_is_neutral(self):
        result = analyze_momentum([100.0] * 9)
        assert result.direction == "neutral"
        assert result.strength == 50
        assert result.acceleration == "stable"
        assert result.roc == 0.0

    def test_bullish(self):
        result = analyze_momentum([100.0] * 5 + [102.0] * 5)
        assert result.direction == "bullish"
        assert result.roc == pytest.approx(2.0)
        assert result.strength == 20
        assert result.acceleration == "stable"

    def test_bearish(self):
        result = analyze_momentum([100.0] * 5 + [98.0] * 5)
        assert result.direction == "bearish"
        assert result.strength == 20

    def test_neutral_band(self):
        result = analyze_momentum([100.0] * 5 + [100.2] * 5)
        assert result.direction == "neutral"
        assert result.strength == 50

    def test_strength_capped(self):
        result = analyze_momentum([100.0] * 5 + [120.0] * 5)
        assert result.strength == 90

    def test_strength_floor(self):
        result = analyze_momentum([100.0] * 5 + [100.6] * 5)
        assert result.direction == "bullish"
        assert result.strength == 10

    def test_strength_rounded_to_int(self):
        result = analyze_momentum([100.0] * 5 + [101.23] * 5)
        assert result.roc == pytest.approx(1.23)
        assert result.strength == 12
        assert isinstance(result.strength, int)

    def test_accelerating(self):
        closes = [100.0, 100.1, 100.2, 100.3, 100.4, 101.0, 101.5, 102.0, 102.5, 103.0]
        assert analyze_momentum(closes).acceleration == "accelerating"

    def test_decelerating(self):
        closes = [100.0, 100.5, 101.0, 101.5, 102.0, 102.1, 102.2, 102.3, 102.4, 102.5]
        assert analyze_momentum(closes).acceleration == "decelerating"


# ── Volume ───────────────────────────────────────────────────────────────


class TestVolume:
    def test_short_input_is_neutral(self):
        result = analyze_volume([100.0] * 4)
        assert (result.profile, result.trend, result.strength, result.ratio) == (
            "average", "neutral", 50, 1.0,
        )

    def test_zero_volume_is_neutral(self):
        assert analyze_volume([0.0] * 10).profile == "average"

    def test_flat_volume_is_average(self):
        result = analyze_volume([100.0] * 10)
        assert result.profile == "average"
        assert result.strength == 50
        assert result.trend == "neutral"
        assert result.ratio == pytest.approx(1.0)

    def test_spike_is_high_and_increasing(self):
        result = analyze_volume([100.0] * 15 + [300.0] * 5)
        assert result.ratio == pytest.approx(2.0)
        assert result.profile == "high"
        assert result.strength == 80
        assert result.trend == "increasing"

    def test_dry_up_is_low_and_decreasing(self):
        result = analyze_volume([300.0] * 15 + [50.0] * 5)
        assert result.profile == "low"
        assert result.strength == 30
        assert result.trend == "decreasing"

    def test_band_boundary_is_inclusive(self):
        # ratio = 150 / 125 = 1.2 exactly
        result = analyze_volume([100.0] * 5 + [150.0] * 5)
        assert result.profile == "above-average"
        assert result.strength == 65

    def test_below_average(self):
        # ratio = 75 / 93.75 = 0.8
        result = analyze_volume([100.0] * 15 + [75.0] * 5)
        assert result.profile == "below-average"
        assert result.strength == 45
