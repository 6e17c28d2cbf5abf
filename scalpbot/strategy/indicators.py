"""Technical indicators — EMA, RSI, MACD, Stoch RSI, ATR, MFI, Bollinger, VWAP.

Pure functions over ordered float sequences, no I/O.  None of them raise on
short input: each documents the neutral value it returns instead.
"""

import math

from scalpbot.strategy.models import BollingerBands, MACDResult


# ── EMA ──────────────────────────────────────────────────────────────────


def ema_series(values: list[float], period: int) -> list[float]:
    """Calculate an Exponential Moving Average series.

    Uses the standard EMA formula:
        ``EMA_today = value × k + EMA_yesterday × (1 - k)``
    where ``k = 2 / (period + 1)``.

    The first EMA value is seeded with the SMA of the first *period*
    values.  Returns a list the same length as *values*; entries before
    the seed are ``float('nan')``.  Fewer than *period* values yields an
    all-NaN list.
    """
    series: list[float] = [float("nan")] * len(values)
    if period <= 0 or len(values) < period:
        return series

    k = 2.0 / (period + 1)

    # Seed: SMA of first *period* values
    prev = sum(values[:period]) / period
    series[period - 1] = prev

    for i in range(period, len(values)):
        prev = (values[i] - prev) * k + prev
        series[i] = prev

    return series


def ema(values: list[float], period: int) -> float:
    """Return the latest EMA value of *values*.

    With fewer than *period* values the last value is returned unchanged
    (0.0 for an empty list).
    """
    if not values:
        return 0.0
    if len(values) < period:
        return values[-1]
    return ema_series(values, period)[-1]


# ── RSI ──────────────────────────────────────────────────────────────────


def rsi(values: list[float], period: int = 14) -> float:
    """Relative Strength Index over the last *period* deltas.

    Algorithm:
        1. delta = value[i] - value[i-1] for the trailing *period* deltas.
        2. avg_gain = Σgains / period, avg_loss = Σ|losses| / period.
        3. RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    Returns 50 with fewer than ``period + 1`` values and 100 when the
    window has no losses.
    """
    if period <= 0 or len(values) < period + 1:
        return 50.0

    gains = 0.0
    losses = 0.0
    for i in range(len(values) - period, len(values)):
        change = values[i] - values[i - 1]
        if change > 0:
            gains += change
        else:
            losses += abs(change)

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def rsi_series(values: list[float], period: int = 14) -> list[float]:
    """Rolling RSI: one value per trailing window ending at index ≥ *period*."""
    return [
        rsi(values[: end + 1], period)
        for end in range(period, len(values))
    ]


# ── MACD ─────────────────────────────────────────────────────────────────

MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9
MACD_MIN_POINTS = MACD_SLOW + MACD_SIGNAL


def macd(values: list[float]) -> MACDResult:
    """Moving Average Convergence Divergence with a proper signal line.

    value     = EMA12 − EMA26 of the latest window
    signal    = EMA9 of the MACD-value history (one value per window
                ending at index 25 onward)
    histogram = value − signal

    The history is built from one running EMA pass per period, which is
    identical to recomputing ``ema()`` on every growing window.

    Returns ``MACDResult(0, 0, 0)`` with fewer than 35 values.
    """
    if len(values) < MACD_MIN_POINTS:
        return MACDResult(value=0.0, signal=0.0, histogram=0.0)

    fast = ema_series(values, MACD_FAST)
    slow = ema_series(values, MACD_SLOW)
    history = [fast[i] - slow[i] for i in range(MACD_SLOW - 1, len(values))]

    value = history[-1]
    signal = ema(history, MACD_SIGNAL)
    return MACDResult(value=value, signal=signal, histogram=value - signal)


# ── Stochastic RSI ───────────────────────────────────────────────────────


def stochastic_rsi(values: list[float], period: int = 14) -> float:
    """Stochastic-normalise the latest RSI against the last *period* RSIs.

    ``StochRSI = (RSI - min(RSI_n)) / (max(RSI_n) - min(RSI_n)) × 100``

    Returns 50 with fewer than ``2 × period`` values or when the RSI
    range is flat.
    """
    if period <= 0 or len(values) < 2 * period:
        return 50.0

    window = rsi_series(values, period)[-period:]
    lowest = min(window)
    highest = max(window)
    if highest == lowest:
        return 50.0
    return (window[-1] - lowest) / (highest - lowest) * 100.0


# ── ATR ──────────────────────────────────────────────────────────────────


def atr(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14,
) -> float:
    """Calculate the Average True Range over *period* bars.

    Uses the standard True Range definition:
        TR = max(high - low, |high - prev_close|, |low - prev_close|)

    Returns the simple average of the last *period* true ranges, or 0
    with fewer than ``period + 1`` bars.
    """
    n = min(len(highs), len(lows), len(closes))
    if period <= 0 or n < period + 1:
        return 0.0

    true_ranges: list[float] = []
    for i in range(1, n):
        prev_close = closes[i - 1]
        tr = max(
            highs[i] - lows[i],
            abs(highs[i] - prev_close),
            abs(lows[i] - prev_close),
        )
        true_ranges.append(tr)

    # Use the last *period* true ranges
    recent = true_ranges[-period:]
    return max(sum(recent) / len(recent), 0.0)


# ── MFI ──────────────────────────────────────────────────────────────────


def mfi(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    volumes: list[float],
    period: int = 14,
) -> float:
    """Money Flow Index over the last *period* samples.

    Raw money flow (typical price × volume) counts as positive when the
    typical price rose versus the previous bar and negative when it fell.

    Returns 50 with fewer than ``period + 1`` bars and 100 when there is
    no negative flow.
    """
    n = min(len(highs), len(lows), len(closes), len(volumes))
    if period <= 0 or n < period + 1:
        return 50.0

    typical = [(highs[i] + lows[i] + closes[i]) / 3 for i in range(n)]

    positive = 0.0
    negative = 0.0
    for i in range(n - period, n):
        flow = typical[i] * volumes[i]
        if typical[i] > typical[i - 1]:
            positive += flow
        elif typical[i] < typical[i - 1]:
            negative += flow

    if negative == 0:
        return 100.0

    ratio = positive / negative
    return 100.0 - 100.0 / (1.0 + ratio)


# ── Bollinger Bands ──────────────────────────────────────────────────────


def bollinger_bands(
    values: list[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> BollingerBands:
    """Calculate Bollinger Bands for the latest window.

    Middle = SMA(value, *period*)
    Upper  = middle + *std_dev* × σ
    Lower  = middle − *std_dev* × σ
    Width  = (upper − lower) / middle × 100

    ``position`` is ``"upper"`` above middle + 1σ, ``"lower"`` below
    middle − 1σ, otherwise ``"middle"``.  With fewer than *period* values
    the bands collapse onto the last value.
    """
    if not values:
        return BollingerBands(upper=0.0, middle=0.0, lower=0.0, width=0.0, position="middle")

    current = values[-1]
    if len(values) < period:
        return BollingerBands(
            upper=current, middle=current, lower=current, width=0.0, position="middle",
        )

    window = values[-period:]
    sma = sum(window) / period
    variance = sum((x - sma) ** 2 for x in window) / period
    sigma = math.sqrt(variance)

    upper = sma + std_dev * sigma
    lower = sma - std_dev * sigma
    width = (upper - lower) / sma * 100 if sma else 0.0

    if current > sma + sigma:
        position = "upper"
    elif current < sma - sigma:
        position = "lower"
    else:
        position = "middle"

    return BollingerBands(
        upper=upper, middle=sma, lower=lower, width=width, position=position,
    )


# ── VWAP ─────────────────────────────────────────────────────────────────


def vwap(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    volumes: list[float],
) -> float | None:
    """Volume-weighted typical price over the whole supplied window.

    Returns ``None`` when the window carries no volume.
    """
    weighted = 0.0
    total_volume = 0.0
    for h, l, c, v in zip(highs, lows, closes, volumes):
        weighted += (h + l + c) / 3 * v
        total_volume += v

    if total_volume <= 0:
        return None
    return weighted / total_volume
