"""Wall-clock conversions between ``HH:MM[:SS]`` and minutes since midnight.

All values are local times with no offset. Anything outside a single day
is rejected with :class:`InvalidTimeError` rather than wrapped or clamped.
"""
from __future__ import annotations
import re
from datetime import time

MINUTES_PER_DAY = 24 * 60
DAY_START = 0
DAY_END = 23 * 60 + 59  # "23:59", used for all-day slots

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?$")


class InvalidTimeError(ValueError):
    pass


def time_to_minutes(value: str | time) -> int:
    """``"09:30"`` / ``"09:30:00"`` / ``time(9, 30)`` -> 570. Seconds are dropped."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise InvalidTimeError(f"Invalid time: {value!r}")
    m = _TIME_RE.match(value.strip())
    if not m:
        raise InvalidTimeError(f"Invalid time: {value!r}")
    h, mi, s = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if h > 23 or mi > 59 or s > 59:
        raise InvalidTimeError(f"Time out of range: {value!r}")
    return h * 60 + mi


def minutes_to_time(minutes: int) -> str:
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidTimeError(f"Minutes must be an integer: {minutes!r}")
    if not DAY_START <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeError(f"Minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time(value: time | None) -> str | None:
    if value is None:
        return None
    return f"{value.hour:02d}:{value.minute:02d}"
