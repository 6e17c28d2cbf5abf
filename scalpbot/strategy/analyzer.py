"""Market analyzer — one structured report per symbol and trading style.

Flow:
    1. Fetch the quote (unknown symbol → ``InvalidSymbolError``, nothing else runs).
    2. Fetch the HTF series; failures propagate.
    3. Fetch the LTF series; failures are logged and leave ``ltf=None``.
    4. Snapshot both timeframes, score confidence on the HTF snapshot.
    5. Gate the trade, derive bias and targets, run the advisory filters.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from scalpbot.broker.errors import MarketDataError
from scalpbot.broker.models import Quote
from scalpbot.models.style_config import get_style_config
from scalpbot.risk.targets import TargetSet, compute_targets
from scalpbot.strategy.confidence import (
    TradeDecision,
    alignment_score,
    compute_confidence,
    decide_trade,
    is_vwap_extended,
)
from scalpbot.strategy.models import IndicatorSnapshot
from scalpbot.strategy.session_filter import (
    EXCHANGE_TZ,
    bad_liquidity_reason,
    get_market_session,
)
from scalpbot.strategy.snapshot import compute_indicators

logger = logging.getLogger("scalpbot.analyzer")


@dataclass(frozen=True)
class AnalysisReport:
    """Everything a downstream formatter needs to describe a setup."""

    symbol: str
    style: str
    quote: Quote
    session: str
    htf: IndicatorSnapshot
    ltf: Optional[IndicatorSnapshot]
    confidence: int
    decision: TradeDecision
    bias: Optional[str]
    targets: Optional[TargetSet]
    alignment_score: int
    vwap_extended: bool
    liquidity_warning: Optional[str]

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "style": self.style,
            "quote": self.quote.to_dict(),
            "session": self.session,
            "htf": self.htf.to_dict(),
            "ltf": self.ltf.to_dict() if self.ltf is not None else None,
            "confidence": self.confidence,
            "decision": asdict(self.decision),
            "bias": self.bias,
            "targets": asdict(self.targets) if self.targets is not None else None,
            "alignment_score": self.alignment_score,
            "vwap_extended": self.vwap_extended,
            "liquidity_warning": self.liquidity_warning,
        }


def derive_bias(snapshot: IndicatorSnapshot, direction: Optional[str] = None) -> Optional[str]:
    """Return ``"CALL"``/``"PUT"`` from an explicit direction or the HTF trend."""
    if direction:
        return direction.upper()
    if snapshot.trend.direction == "uptrend":
        return "CALL"
    if snapshot.trend.direction == "downtrend":
        return "PUT"
    return None


class MarketAnalyzer:
    """Runs the analysis pipeline against a market data client.

    Args:
        broker: ``TradierClient`` (or duck-type with ``fetch_quote`` and
            ``fetch_series``).
        clock: Returns the current time; defaults to ``datetime.now(UTC)``.
        tz_name: Exchange timezone for session classification.
    """

    def __init__(
        self,
        broker,
        clock: Optional[Callable[[], datetime]] = None,
        tz_name: str = EXCHANGE_TZ,
    ) -> None:
        self._broker = broker
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tz_name = tz_name

    async def analyze(
        self,
        symbol: str,
        style: str = "scalping",
        direction: Optional[str] = None,
    ) -> AnalysisReport:
        """Analyze *symbol* for *style*.

        Raises:
            KeyError: Unknown trading style.
            ValueError: *direction* is given but is not CALL or PUT.
            InvalidSymbolError: The provider has no quote for *symbol*.
            MarketDataError: The quote or HTF series could not be fetched.
        """
        style_cfg = get_style_config(style)
        symbol = symbol.strip().upper()
        if direction is not None and direction.upper() not in ("CALL", "PUT"):
            raise ValueError(f"direction must be 'CALL' or 'PUT', got '{direction}'")

        # 1 ── Quote
        quote = await self._broker.fetch_quote(symbol)

        # 2 ── Higher timeframe
        htf_bars = await self._broker.fetch_series(
            symbol, style_cfg.htf_interval, style_cfg.lookback_days,
        )

        # 3 ── Lower timeframe (optional)
        ltf_bars = None
        try:
            ltf_bars = await self._broker.fetch_series(
                symbol, style_cfg.ltf_interval, style_cfg.lookback_days,
            )
        except MarketDataError as exc:
            logger.warning(
                "LTF %s data unavailable for %s: %s", style_cfg.ltf_interval, symbol, exc,
            )

        # 4 ── Snapshots + confidence
        htf = compute_indicators(htf_bars, quote)
        ltf = compute_indicators(ltf_bars, quote) if ltf_bars else None
        confidence = compute_confidence(htf)
        decision = decide_trade(confidence, style_cfg.name, ltf)

        # 5 ── Bias, targets, filters
        bias = derive_bias(htf, direction)
        targets = None
        if bias is not None:
            atr_value = ltf.atr if ltf is not None and ltf.atr > 0 else htf.atr
            targets = compute_targets(quote.last, style_cfg, atr_value, bias)

        reference_vwap = ltf.vwap if ltf is not None else htf.vwap
        now = self._clock()
        liquidity_warning = None
        if style_cfg.name == "scalping":
            liquidity_warning = bad_liquidity_reason(now, self._tz_name)

        report = AnalysisReport(
            symbol=symbol,
            style=style_cfg.name,
            quote=quote,
            session=get_market_session(now, self._tz_name),
            htf=htf,
            ltf=ltf,
            confidence=confidence,
            decision=decision,
            bias=bias,
            targets=targets,
            alignment_score=alignment_score(htf, ltf),
            vwap_extended=is_vwap_extended(quote.last, reference_vwap, style_cfg.name),
            liquidity_warning=liquidity_warning,
        )
        logger.info(
            "Analysis %s [%s]: confidence %d → %s, bias %s",
            symbol, style_cfg.name, confidence, decision.action, bias or "none",
        )
        return report
