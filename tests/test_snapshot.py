"""Tests for scalpbot.strategy.snapshot — per-timeframe indicator aggregation."""

import pytest

from scalpbot.broker.models import Bar, Quote
from scalpbot.strategy.models import MACDResult, MomentumAnalysis, VolumeAnalysis
from scalpbot.strategy.snapshot import composite_strength, compute_indicators, neutral_snapshot


def _make_bar(i: int, close: float, vol: int = 1000) -> Bar:
    return Bar(
        timestamp=f"2025-01-10T{9 + i // 60:02d}:{i % 60:02d}:00",
        open=close - 0.2,
        high=close + 0.5,
        low=close - 0.5,
        close=close,
        volume=vol,
    )


def _rising_bars(n: int = 60) -> list[Bar]:
    closes = []
    price = 580.0
    steps = [0.6, 0.4, -0.3, 0.5, -0.2]
    for i in range(n):
        price += steps[i % len(steps)]
        closes.append(round(price, 2))
    return [_make_bar(i, c, 1000 + (i % 7) * 150) for i, c in enumerate(closes)]


def _quote(last: float) -> Quote:
    return Quote(symbol="SPY", last=last, prev_close=last - 1)


class TestNeutralSnapshot:
    def test_empty_bars(self):
        snap = compute_indicators([], _quote(585.5))
        assert snap == neutral_snapshot(_quote(585.5))
        assert snap.rsi == 50.0
        assert snap.vwap == 585.5
        assert snap.trend.direction == "sideways"
        assert snap.strength == 50
        assert snap.support_levels == ()
        assert snap.resistance_levels == ()
        assert snap.macd == MACDResult(0.0, 0.0, 0.0)


class TestComputeIndicators:
    def test_fully_populated(self):
        bars = _rising_bars()
        snap = compute_indicators(bars, _quote(bars[-1].close))
        assert 0 <= snap.rsi <= 100
        assert 0 <= snap.stoch_rsi <= 100
        assert 0 <= snap.mfi <= 100
        assert snap.atr > 0
        assert snap.bollinger_bands.lower <= snap.bollinger_bands.middle <= snap.bollinger_bands.upper
        assert 10 <= snap.strength <= 90
        assert snap.trend.direction == "uptrend"
        assert snap.vwap > 0

    def test_levels_on_correct_side(self):
        bars = _rising_bars()
        price = bars[-1].close
        snap = compute_indicators(bars, _quote(price))
        assert len(snap.support_levels) <= 3
        assert len(snap.resistance_levels) <= 3
        assert all(l.price < price for l in snap.support_levels)
        assert all(l.price > price for l in snap.resistance_levels)

    def test_idempotent(self):
        bars = _rising_bars()
        quote = _quote(bars[-1].close)
        assert compute_indicators(bars, quote) == compute_indicators(bars, quote)

    def test_zero_volume_falls_back_to_quote(self):
        bars = [_make_bar(i, 100.0 + i, vol=0) for i in range(30)]
        snap = compute_indicators(bars, _quote(131.0))
        assert snap.vwap == 131.0

    def test_short_history_degrades_gracefully(self):
        bars = [_make_bar(i, 100.0 + i) for i in range(5)]
        snap = compute_indicators(bars, _quote(104.0))
        assert snap.macd == MACDResult(0.0, 0.0, 0.0)
        assert snap.atr == 0.0
        assert snap.rsi == 50.0

    def test_to_dict(self):
        bars = _rising_bars()
        data = compute_indicators(bars, _quote(bars[-1].close)).to_dict()
        assert set(data) >= {
            "vwap", "rsi", "macd", "stoch_rsi", "atr", "volume_analysis", "momentum",
            "trend", "mfi", "bollinger_bands", "support_levels", "resistance_levels",
            "strength",
        }
        assert isinstance(data["support_levels"], list)
        assert isinstance(data["macd"], dict)


class TestCompositeStrength:
    def _momentum(self, direction: str) -> MomentumAnalysis:
        return MomentumAnalysis(direction=direction, strength=50, acceleration="stable", roc=0.0)

    def _volume(self, strength: int) -> VolumeAnalysis:
        return VolumeAnalysis(profile="average", trend="neutral", strength=strength, ratio=1.0)

    def test_neutral_inputs(self):
        score = composite_strength(50.0, MACDResult(0, 0, 0), self._momentum("neutral"), self._volume(50))
        assert score == 50

    def test_bullish_inputs(self):
        # 50 + 4 + 10 + 15 + 4.5 = 83.5 → 84
        score = composite_strength(60.0, MACDResult(1, 0.5, 0.5), self._momentum("bullish"), self._volume(65))
        assert score == 84

    def test_clamped_high(self):
        score = composite_strength(100.0, MACDResult(1, 0, 1), self._momentum("bullish"), self._volume(80))
        assert score == 90

    def test_clamped_low(self):
        score = composite_strength(0.0, MACDResult(-1, 0, -1), self._momentum("bearish"), self._volume(30))
        assert score == 10
