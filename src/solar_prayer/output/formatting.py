from __future__ import annotations

"""Presentation helpers for minute-of-day values and (hour, minute) pairs."""

import math
from typing import Tuple

from solar_prayer.core.normalize import normalize_minutes


def to_hours_minutes(minutes: float) -> Tuple[int, int]:
    """Split a minute-of-day value into (hour, minute), rounding to the minute.

    Rounding happens before the split, so 59.7 gives (1, 0) and never
    (0, 60). The result is wrapped into 00:00..23:59.
    """
    if not math.isfinite(minutes):
        raise ValueError(f"minutes must be finite, got {minutes}")
    total = int(round(normalize_minutes(float(minutes)))) % 1440
    return divmod(total, 60)


def format_time(hour: int, minute: int) -> str:
    """12-hour clock, e.g. ``format_time(13, 5) == "1:05 PM"``."""
    h = hour % 12
    if h == 0:
        h = 12
    period = "AM" if hour < 12 else "PM"
    return f"{h}:{minute:02d} {period}"


def format_time_24_with_period(hour: int, minute: int) -> str:
    """24-hour clock with an AM/PM suffix, e.g. ``"13:05 PM"``."""
    period = "AM" if hour < 12 else "PM"
    return f"{hour:02d}:{minute:02d} {period}"


def format_hhmm(minutes: float) -> str:
    """``"HH:MM"`` for a minute-of-day value."""
    h, m = to_hours_minutes(minutes)
    return f"{h:02d}:{m:02d}"


__all__ = [
    "to_hours_minutes",
    "format_time",
    "format_time_24_with_period",
    "format_hhmm",
]
