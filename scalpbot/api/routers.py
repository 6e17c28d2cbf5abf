"""Internal API routers — /session, /analysis, /trades, /events endpoints.

No business logic. Delegates to the trade desk and market analyzer held on
``app.state`` by :func:`scalpbot.main.create_app`.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from scalpbot.broker.errors import InvalidSymbolError, MarketDataError
from scalpbot.strategy.session_filter import (
    EXCHANGE_TZ,
    bad_liquidity_reason,
    get_market_session,
    is_market_open,
)

logger = logging.getLogger("scalpbot")
router = APIRouter()

_NO_DESK = "No trade desk configured"
_NO_ANALYZER = "No market analyzer configured"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _market_error(exc: MarketDataError) -> JSONResponse:
    if isinstance(exc, InvalidSymbolError):
        return _error(404, str(exc))
    logger.error("Market data error: %s", exc)
    return _error(502, str(exc))


def _timezone(request: Request) -> str:
    config = getattr(request.app.state, "config", None)
    return config.exchange_timezone if config is not None else EXCHANGE_TZ


# ── Session ──────────────────────────────────────────────────────────────


@router.get("/session")
async def get_session(request: Request):
    """Current exchange session and liquidity warning."""
    now = datetime.now(timezone.utc)
    tz_name = _timezone(request)
    session = get_market_session(now, tz_name)
    return {
        "session": session,
        "open": is_market_open(session),
        "liquidity_warning": bad_liquidity_reason(now, tz_name),
        "checked_at": now.isoformat(),
    }


# ── Analysis ─────────────────────────────────────────────────────────────


@router.get("/analysis/{symbol}")
async def get_analysis(
    request: Request,
    symbol: str,
    style: Optional[str] = Query(None),
    direction: Optional[str] = Query(None),
):
    """Run the analyzer for *symbol*.

    ``style`` defaults to the configured trading style.
    """
    analyzer = request.app.state.analyzer
    if analyzer is None:
        return _error(503, _NO_ANALYZER)
    if style is None:
        config = getattr(request.app.state, "config", None)
        style = config.trading_style if config is not None else "scalping"

    try:
        report = await analyzer.analyze(symbol, style=style, direction=direction)
    except KeyError as exc:
        return _error(400, exc.args[0])
    except ValueError as exc:
        return _error(400, str(exc))
    except MarketDataError as exc:
        return _market_error(exc)
    return report.to_dict()


# ── Trades ───────────────────────────────────────────────────────────────


@router.post("/trades")
async def post_trade(request: Request, body: dict):
    """Track a new trade.

    Body: ``{"symbol": "SPY", "direction": "CALL", "entry_price": 585.5}``
    """
    desk = request.app.state.desk
    if desk is None:
        return _error(503, _NO_DESK)
    try:
        entry_price = float(body.get("entry_price", 0))
    except (TypeError, ValueError):
        return _error(400, f"Invalid entry_price: {body.get('entry_price')!r}")

    try:
        trade = await desk.enter(
            body.get("symbol", ""), body.get("direction", ""), entry_price,
        )
    except ValueError as exc:
        return _error(400, str(exc))
    except MarketDataError as exc:
        return _market_error(exc)
    return trade.to_dict()


@router.get("/trades")
async def get_trades(request: Request):
    """All tracked trades."""
    desk = request.app.state.desk
    if desk is None:
        return _error(503, _NO_DESK)
    return [t.to_dict() for t in desk.list_active()]


@router.get("/trades/{symbol}")
async def get_trade(request: Request, symbol: str):
    """Live check of one tracked trade (current price and P/L %)."""
    desk = request.app.state.desk
    if desk is None:
        return _error(503, _NO_DESK)
    try:
        check = await desk.check_one(symbol)
    except MarketDataError as exc:
        return _market_error(exc)
    if check is None:
        return _error(404, f"No active trade for {symbol.upper()}")
    return check.to_dict()


@router.delete("/trades/{symbol}")
async def delete_trade(request: Request, symbol: str):
    """Stop tracking *symbol*."""
    desk = request.app.state.desk
    if desk is None:
        return _error(503, _NO_DESK)
    if not desk.close(symbol):
        return _error(404, f"No active trade for {symbol.upper()}")
    return {"status": "closed", "symbol": symbol.upper()}


# ── Events ───────────────────────────────────────────────────────────────


@router.get("/events")
async def get_events(request: Request, limit: int = Query(20, ge=1, le=50)):
    """Most recent trade alerts, newest first."""
    desk = request.app.state.desk
    if desk is None:
        return _error(503, _NO_DESK)
    return [e.to_dict() for e in desk.recent_events(limit)]
