"""Shared utilities used across the reservation bot."""

import re
from datetime import datetime, tzinfo
from typing import Callable

from dateutil import tz

Clock = Callable[[], datetime]


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("0812-3456-7890")
        '081234567890'
        >>> normalize_phone("+62 (812) 3456 7890")
        '+6281234567890'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def restaurant_tz(name: str) -> tzinfo:
    """Resolve a timezone name, falling back to UTC when it is unknown."""
    zone = tz.gettz(name)
    return zone if zone is not None else tz.UTC


def make_clock(timezone_name: str) -> Clock:
    """Return a clock producing aware datetimes in the given timezone."""
    zone = restaurant_tz(timezone_name)

    def _now() -> datetime:
        return datetime.now(zone)

    return _now
