"""Strategy data models — typed representations for indicator outputs."""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram for the latest bar."""

    value: float
    signal: float
    histogram: float


@dataclass(frozen=True)
class BollingerBands:
    """Bollinger Bands for the latest window."""

    upper: float
    middle: float
    lower: float
    width: float
    position: str  # "upper", "middle" or "lower"


@dataclass(frozen=True)
class VolumeAnalysis:
    """Recent-volume profile relative to the whole window."""

    profile: str  # "high", "above-average", "average", "below-average", "low"
    trend: str  # "increasing", "decreasing", "neutral"
    strength: int  # 10–90
    ratio: float


@dataclass(frozen=True)
class MomentumAnalysis:
    """Short-term price momentum."""

    direction: str  # "bullish", "bearish", "neutral"
    strength: int  # 10–90
    acceleration: str  # "accelerating", "decelerating", "stable"
    roc: float  # percent change, last-5 average vs prior-5 average


@dataclass(frozen=True)
class TrendAnalysis:
    """Trend classification from EMA structure and swing pattern."""

    direction: str  # "uptrend", "downtrend", "sideways"
    strength: str  # "strong", "moderate", "weak"
    ema20: float
    ema50: float
    ema_stack: str  # "bullish", "bearish", "mixed"


@dataclass(frozen=True)
class PriceLevel:
    """A support or resistance price level."""

    price: float
    strength: str  # "strong", "moderate", "weak"
    type: str  # "swing-low", "swing-high", "vwap"


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Every indicator for one timeframe, always fully populated."""

    vwap: float
    rsi: float
    macd: MACDResult
    stoch_rsi: float
    atr: float
    volume_analysis: VolumeAnalysis
    momentum: MomentumAnalysis
    trend: TrendAnalysis
    mfi: float
    bollinger_bands: BollingerBands
    support_levels: tuple[PriceLevel, ...] = field(default_factory=tuple)
    resistance_levels: tuple[PriceLevel, ...] = field(default_factory=tuple)
    strength: int = 50

    def to_dict(self) -> dict:
        """Plain-dict form for JSON reports."""
        data = asdict(self)
        data["support_levels"] = [asdict(l) for l in self.support_levels]
        data["resistance_levels"] = [asdict(l) for l in self.resistance_levels]
        return data
