"""Trading style configuration dataclass.

Each style fixes the timeframes used for analysis and the percentage
targets used by the ATR-adjusted target engine.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TradingStyleConfig:
    """Static settings for one trading style.

    Percentages are expressed in percent (``0.3`` means 0.3%).
    """

    name: str
    htf_interval: str
    ltf_interval: str
    lookback_days: int
    tp1_pct: float
    tp2_pct: float
    sl_pct: float
    min_rr: float
    hold_time: str


TRADING_STYLES: dict[str, TradingStyleConfig] = {
    "scalping": TradingStyleConfig(
        name="scalping",
        htf_interval="5min",
        ltf_interval="1min",
        lookback_days=5,
        tp1_pct=0.3,
        tp2_pct=0.6,
        sl_pct=0.5,
        min_rr=1.2,
        hold_time="15-30 minutes",
    ),
    "daytrading": TradingStyleConfig(
        name="daytrading",
        htf_interval="15min",
        ltf_interval="5min",
        lookback_days=10,
        tp1_pct=0.8,
        tp2_pct=1.5,
        sl_pct=0.6,
        min_rr=1.5,
        hold_time="1-4 hours",
    ),
    "swing": TradingStyleConfig(
        name="swing",
        htf_interval="daily",
        ltf_interval="15min",
        lookback_days=120,
        tp1_pct=3.0,
        tp2_pct=6.0,
        sl_pct=2.0,
        min_rr=2.0,
        hold_time="2-10 days",
    ),
}

_STYLE_ALIASES = {
    "scalp": "scalping",
    "day-trading": "daytrading",
    "day_trading": "daytrading",
    "day": "daytrading",
    "swing-trading": "swing",
}


def get_style_config(name: str) -> TradingStyleConfig:
    """Look up a trading style by name (case-insensitive, aliases allowed).

    Raises ``KeyError`` if the style is not registered.
    """
    key = name.strip().lower()
    key = _STYLE_ALIASES.get(key, key)
    if key not in TRADING_STYLES:
        raise KeyError(
            f"Unknown trading style '{name}'. "
            f"Available: {', '.join(TRADING_STYLES.keys())}"
        )
    return TRADING_STYLES[key]
