from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

Clock = Callable[[], datetime]


def business_clock(timezone: str) -> Clock:
    """Return a clock producing aware datetimes in the business timezone."""
    tz = _safe_timezone(timezone)

    def _now() -> datetime:
        return datetime.now(tz)

    return _now


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logging.getLogger(__name__).warning("Unknown timezone, falling back to UTC", extra={"reason": name})
        return ZoneInfo("UTC")
