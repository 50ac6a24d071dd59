from __future__ import annotations

import re
from datetime import date
from typing import Any

TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
DATE_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def is_valid_time(text: str) -> bool:
    """HH:MM with a two digit hour in 00..23 and minutes in 00..59."""
    return bool(TIME_PATTERN.match(text))


def parse_date(text: str) -> date | None:
    """Parse DD/MM/YYYY into a date. Returns None for malformed or impossible dates."""
    match = DATE_PATTERN.match(text)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date(text: str) -> bool:
    return parse_date(text) is not None


def is_valid_rating(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 1 <= value <= 5


def parse_rating(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None
