"""Tradier REST API async client.

Handles all communication with Tradier market data: quote snapshots and
OHLCV history (intraday time & sales or daily history).
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from scalpbot.broker.errors import (
    InvalidSymbolError,
    MarketDataError,
    ProviderTransientError,
)
from scalpbot.broker.models import Bar, Quote
from scalpbot.config import Config

logger = logging.getLogger("scalpbot")

# Retry settings
_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 2.0  # seconds; doubles each attempt
_RETRYABLE_STATUS_CODES = {502, 503, 504, 429}

INTRADAY_INTERVALS = {"1min", "5min", "15min"}
HISTORY_INTERVALS = {"daily", "weekly", "monthly"}


def _as_list(payload) -> list:
    """Tradier returns a bare object when a collection has one element."""
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def _num(value, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class TradierClient:
    """Async client wrapping the Tradier market data API."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._base_url = config.tradier_base_url
        self._headers = {
            "Authorization": f"Bearer {config.tradier_api_key}",
            "Accept": "application/json",
        }

    # ── Retry helper ─────────────────────────────────────────────────────

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> httpx.Response:
        """Execute an HTTP request with exponential-backoff retry.

        Retries on transient server errors (502, 503, 504), rate-limits
        (429) and transport errors.  Raises ``ProviderTransientError`` once
        retries are exhausted and ``MarketDataError`` on any other HTTP
        error status.
        """
        last_exc: Optional[Exception] = None

        for attempt in range(_MAX_RETRIES):
            try:
                async with httpx.AsyncClient() as client:
                    resp = await getattr(client, method)(
                        url,
                        headers=self._headers,
                        timeout=30.0,
                        **kwargs,
                    )

                if resp.status_code in _RETRYABLE_STATUS_CODES:
                    delay = _RETRY_BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        "Tradier %s %s returned %d — retry %d/%d in %.1fs",
                        method.upper(), url, resp.status_code,
                        attempt + 1, _MAX_RETRIES, delay,
                    )
                    await asyncio.sleep(delay)
                    last_exc = httpx.HTTPStatusError(
                        f"Server error '{resp.status_code}'",
                        request=resp.request,
                        response=resp,
                    )
                    continue

                resp.raise_for_status()
                return resp

            except httpx.HTTPStatusError as exc:
                raise MarketDataError(
                    f"Tradier {method.upper()} {url} failed: "
                    f"{exc.response.status_code}"
                ) from exc

            except httpx.TransportError as exc:
                delay = _RETRY_BASE_DELAY * (2 ** attempt)
                logger.warning(
                    "Tradier %s %s transport error (%s) — retry %d/%d in %.1fs",
                    method.upper(), url, exc,
                    attempt + 1, _MAX_RETRIES, delay,
                )
                last_exc = exc
                await asyncio.sleep(delay)

        # All retries exhausted
        raise ProviderTransientError(
            f"Tradier {method.upper()} {url} failed after {_MAX_RETRIES} attempts: {last_exc}"
        ) from last_exc

    # ── Quotes ───────────────────────────────────────────────────────────

    async def fetch_quote(self, symbol: str) -> Quote:
        """Fetch the latest quote for *symbol*.

        ``last`` falls back to the previous close when the market is closed
        and no last trade is reported.

        Raises:
            InvalidSymbolError: If Tradier returns no quote for *symbol*.
        """
        url = f"{self._base_url}/markets/quotes"
        resp = await self._request_with_retry("get", url, params={"symbols": symbol})

        data = resp.json() or {}
        quotes = _as_list((data.get("quotes") or {}).get("quote"))
        if not quotes:
            raise InvalidSymbolError(symbol)

        q = quotes[0]
        prev_close = _num(q.get("prevclose"))
        last = q.get("last")
        return Quote(
            symbol=q.get("symbol", symbol),
            last=_num(last) if last is not None else prev_close,
            bid=_num(q.get("bid")),
            ask=_num(q.get("ask")),
            volume=int(_num(q.get("volume"))),
            change=_num(q.get("change")),
            change_percent=_num(q.get("change_percentage")),
            high=_num(q.get("high")),
            low=_num(q.get("low")),
            open=_num(q.get("open")),
            prev_close=prev_close,
        )

    # ── Bars ─────────────────────────────────────────────────────────────

    async def fetch_series(
        self,
        symbol: str,
        interval: str,
        lookback_days: int,
        now: Optional[datetime] = None,
    ) -> list[Bar]:
        """Fetch OHLCV bars for *symbol*.

        Args:
            symbol: e.g. ``"SPY"``
            interval: ``"1min"``, ``"5min"``, ``"15min"`` (time & sales) or
                ``"daily"``, ``"weekly"``, ``"monthly"`` (history).
            lookback_days: Calendar days of history to request.
            now: End of the window; defaults to the current UTC time.

        Returns:
            Bars ordered oldest-first with duplicate timestamps removed.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        start = now - timedelta(days=lookback_days)

        if interval in INTRADAY_INTERVALS:
            url = f"{self._base_url}/markets/timesales"
            params = {
                "symbol": symbol,
                "interval": interval,
                "start": start.strftime("%Y-%m-%d %H:%M"),
                "end": now.strftime("%Y-%m-%d %H:%M"),
                "session_filter": "all",
            }
            resp = await self._request_with_retry("get", url, params=params)
            data = resp.json() or {}
            rows = _as_list((data.get("series") or {}).get("data"))
            time_key = "time"
        elif interval in HISTORY_INTERVALS:
            url = f"{self._base_url}/markets/history"
            params = {
                "symbol": symbol,
                "interval": interval,
                "start": start.strftime("%Y-%m-%d"),
                "end": now.strftime("%Y-%m-%d"),
            }
            resp = await self._request_with_retry("get", url, params=params)
            data = resp.json() or {}
            rows = _as_list((data.get("history") or {}).get("day"))
            time_key = "date"
        else:
            raise ValueError(f"Unsupported interval: '{interval}'")

        bars: dict[str, Bar] = {}
        for row in rows:
            timestamp = row.get(time_key)
            if timestamp is None:
                continue
            close = _num(row.get("close"), _num(row.get("price")))
            bars[timestamp] = Bar(
                timestamp=timestamp,
                open=_num(row.get("open"), close),
                high=_num(row.get("high"), close),
                low=_num(row.get("low"), close),
                close=close,
                volume=int(_num(row.get("volume"))),
            )
        return [bars[t] for t in sorted(bars)]
