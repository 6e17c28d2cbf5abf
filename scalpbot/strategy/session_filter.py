"""Session filter — classifies US equity market sessions and chop windows.

All times are exchange-local (``America/New_York`` by default).  Accepts
any timezone-aware datetime; naive datetimes are treated as UTC.
"""

from datetime import datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo

EXCHANGE_TZ = "America/New_York"

PRE_MARKET_OPEN = time(4, 0)
REGULAR_OPEN = time(9, 30)
REGULAR_CLOSE = time(16, 0)
AFTER_HOURS_CLOSE = time(20, 0)

LUNCH_START = time(12, 0)
LUNCH_END = time(13, 0)
CLOSING_BUFFER_START = time(15, 50)


def _to_exchange_time(now: datetime, tz_name: str) -> datetime:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name))


def get_market_session(now: datetime, tz_name: str = EXCHANGE_TZ) -> str:
    """Return ``"pre-market"``, ``"regular"``, ``"after-hours"`` or ``"closed"``.

    Windows (exchange time, weekdays only):
        pre-market   04:00–09:30
        regular      09:30–16:00
        after-hours  16:00–20:00
    """
    local = _to_exchange_time(now, tz_name)
    if local.weekday() >= 5:
        return "closed"

    t = local.time()
    if PRE_MARKET_OPEN <= t < REGULAR_OPEN:
        return "pre-market"
    if REGULAR_OPEN <= t < REGULAR_CLOSE:
        return "regular"
    if REGULAR_CLOSE <= t < AFTER_HOURS_CLOSE:
        return "after-hours"
    return "closed"


def is_market_open(session: str) -> bool:
    """Return ``True`` for any session with live quotes."""
    return session in ("pre-market", "regular", "after-hours")


def bad_liquidity_reason(now: datetime, tz_name: str = EXCHANGE_TZ) -> Optional[str]:
    """Flag windows that are unfavourable for scalping.

    Returns:
        ``"lunch_chop"`` between 12:00 and 13:00, ``"closing_minutes"`` in
        the last 10 minutes before the 16:00 close, else ``None``.
    """
    t = _to_exchange_time(now, tz_name).time()
    if LUNCH_START <= t < LUNCH_END:
        return "lunch_chop"
    if CLOSING_BUFFER_START <= t < REGULAR_CLOSE:
        return "closing_minutes"
    return None
