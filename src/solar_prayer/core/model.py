from __future__ import annotations

"""
model.py
========
Data models shared across the prayer-time engine.

This module is intentionally small and stable. The solver stages, the legacy
adapter and the timetable tools all rely on these types without importing
each other.

Units
-----
- Angles exposed to callers are in degrees; declination is kept in radians
  because every consumer feeds it straight into trigonometry.
- Times are minutes since local midnight (floats).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Tuple


# Output order used everywhere (results, legacy tuples, timetable columns).
PRAYER_NAMES: Tuple[str, ...] = (
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "maghrib",
    "isha",
)

MINUTES_PER_DAY = 1440.0


class AsrMethod(int, Enum):
    """Shadow-length factor used for the Asr time."""

    STANDARD = 1
    HANAFI = 2

    @classmethod
    def parse(cls, value: "AsrMethod | int | str") -> "AsrMethod":
        if isinstance(value, AsrMethod):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {
                "standard": cls.STANDARD,
                "shafii": cls.STANDARD,
                "shafi": cls.STANDARD,
                "hanafi": cls.HANAFI,
            }
            if key in aliases:
                return aliases[key]
            raise ValueError(
                f"Unknown Asr method '{value}'. Use 'standard' or 'hanafi'."
            )
        return cls(int(value))


class HighLatitudeRule(str, Enum):
    """Fallback applied to Fajr/Isha when the angle solution is unusable."""

    NONE = "none"
    MIDDLE_OF_NIGHT = "middle-of-night"
    ONE_SEVENTH = "one-seventh"
    ANGLE_BASED = "angle-based"

    @classmethod
    def parse(cls, value: "HighLatitudeRule | str") -> "HighLatitudeRule":
        if isinstance(value, HighLatitudeRule):
            return value
        key = str(value).strip().lower().replace("_", "-")
        for rule in cls:
            if rule.value == key:
                return rule
        valid = ", ".join(r.value for r in cls)
        raise ValueError(f"Unknown high-latitude rule '{value}'. Use one of: {valid}")


# A place where prayer times are computed.
@dataclass(frozen=True)
class GeoLocation:
    # Latitude in decimal degrees (south negative).
    latitude_deg: float
    # Longitude in decimal degrees (east positive).
    longitude_deg: float
    # Offset from UTC in minutes (east positive, e.g. 180 for UTC+3).
    timezone_minutes: float = 0.0
    # Human readable name, only used for reports.
    name: str = ""

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError(f"latitude_deg out of range [-90, 90]: {self.latitude_deg}")
        if not -180.0 <= self.longitude_deg <= 180.0:
            raise ValueError(
                f"longitude_deg out of range [-180, 180]: {self.longitude_deg}"
            )

    @classmethod
    def from_hours(
        cls,
        latitude_deg: float,
        longitude_deg: float,
        timezone_hours: float,
        name: str = "",
    ) -> "GeoLocation":
        return cls(latitude_deg, longitude_deg, timezone_hours * 60.0, name)


@dataclass(frozen=True)
class SolarParameters:
    """Sun position quantities for one day.

    Attributes
    ----------
    day_of_year : int
        Ordinal day in [1, 366].
    equation_of_time : float
        Apparent minus mean solar time, in minutes.
    declination : float
        Solar declination in radians.
    """

    day_of_year: int
    equation_of_time: float
    declination: float


@dataclass(frozen=True)
class ChronologicalTimes:
    """Adjusted times before the final wrap into a single day.

    Values may be negative or exceed 1440 at extreme latitudes or with large
    offsets; ordering checks are done on these.
    """

    fajr: float
    sunrise: float
    dhuhr: float
    asr: float
    maghrib: float
    isha: float

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(getattr(self, n) for n in PRAYER_NAMES)

    def is_ordered(self) -> bool:
        values = self.as_tuple()
        return all(a <= b for a, b in zip(values, values[1:]))


@dataclass(frozen=True)
class PrayerTimesResult:
    """Six prayer times in minutes since local midnight, each in [0, 1440).

    `valid` is False when at least one time had no geometric solution and
    was replaced by a clamped approximation; `warnings` says which.
    """

    fajr: float
    sunrise: float
    dhuhr: float
    asr: float
    maghrib: float
    isha: float
    valid: bool = True
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[float]:
        return iter(self.as_tuple())

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(getattr(self, n) for n in PRAYER_NAMES)

    def as_dict(self) -> Dict[str, float]:
        return {n: getattr(self, n) for n in PRAYER_NAMES}


__all__ = [
    "PRAYER_NAMES",
    "MINUTES_PER_DAY",
    "AsrMethod",
    "HighLatitudeRule",
    "GeoLocation",
    "SolarParameters",
    "ChronologicalTimes",
    "PrayerTimesResult",
]
