"""Volume profile analysis — pure function, recent volume vs window average."""

from scalpbot.strategy.models import VolumeAnalysis

_NEUTRAL = VolumeAnalysis(profile="average", trend="neutral", strength=50, ratio=1.0)

# (minimum ratio, profile, strength), checked top-down
_PROFILE_BANDS: list[tuple[float, str, int]] = [
    (1.5, "high", 80),
    (1.2, "above-average", 65),
    (0.85, "average", 50),
    (0.7, "below-average", 45),
]


def analyze_volume(volumes: list[float], recent: int = 5) -> VolumeAnalysis:
    """Classify the last *recent* bars' volume against the whole window.

    ``ratio = avg(last recent) / avg(all)``.  Bands: from 1.5 high,
    from 1.2 above-average, from 0.85 average, from 0.7 below-average,
    otherwise low.

    The trend is ``increasing`` / ``decreasing`` when the second half of
    the window averages more than 20% above / below the first half.
    """
    if len(volumes) < recent:
        return _NEUTRAL

    overall = sum(volumes) / len(volumes)
    if overall <= 0:
        return _NEUTRAL

    ratio = (sum(volumes[-recent:]) / recent) / overall

    profile, strength = "low", 30
    for threshold, name, score in _PROFILE_BANDS:
        if ratio >= threshold:
            profile, strength = name, score
            break

    half = len(volumes) // 2
    first_avg = sum(volumes[:half]) / half if half else 0.0
    second_avg = sum(volumes[half:]) / (len(volumes) - half)
    if first_avg > 0 and second_avg > first_avg * 1.2:
        trend = "increasing"
    elif first_avg > 0 and second_avg < first_avg * 0.8:
        trend = "decreasing"
    else:
        trend = "neutral"

    return VolumeAnalysis(profile=profile, trend=trend, strength=strength, ratio=ratio)
