from __future__ import annotations

"""
adapter.py
==========
Backward-compatible facade for callers written against the old
``PrayerTimes(lat, lon, tz_hours)`` object.

The old object carried its settings as instance state and returned twelve
integers (hour, minute for each of the six times). This class keeps that
shape and delegates every calculation to `PrayerTimesCalculator`; it holds no
astronomy of its own.
"""

from typing import Tuple

from solar_prayer.core.engine import PrayerTimesCalculator
from solar_prayer.core.model import AsrMethod, GeoLocation
from solar_prayer.output.formatting import (
    format_time,
    format_time_24_with_period,
    to_hours_minutes,
)
from solar_prayer.profiles.profile import CalculationProfile

LegacyTimes = Tuple[int, int, int, int, int, int, int, int, int, int, int, int]


class LegacyPrayerTimes:
    """Old-style interface: timezone in hours, setters, twelve-int output."""

    def __init__(self, latitude: float, longitude: float, time_zone: float) -> None:
        self._location = GeoLocation.from_hours(latitude, longitude, time_zone)
        self._profile = CalculationProfile()
        self._calculator = PrayerTimesCalculator(self._location, self._profile)

    @property
    def profile(self) -> CalculationProfile:
        return self._profile

    def set_adjustments(
        self,
        adj_fajr: int,
        adj_sunrise: int,
        adj_dhuhr: int,
        adj_asr: int,
        adj_maghrib: int,
        adj_isha: int,
    ) -> None:
        self._profile.set_adjustments(
            adj_fajr, adj_sunrise, adj_dhuhr, adj_asr, adj_maghrib, adj_isha
        )

    def set_calculation_method(self, method: str) -> None:
        self._profile.set_calculation_method(method)

    def set_asr_method(self, method: AsrMethod | int | str) -> None:
        self._profile.set_asr_method(method)

    def set_dst(self, dst_on: bool) -> None:
        self._profile.set_dst(dst_on)

    def calculate(self, day: int, month: int, year: int) -> LegacyTimes:
        """Return (fajr_h, fajr_m, sunrise_h, sunrise_m, ..., isha_h, isha_m)."""
        result = self._calculator.compute(day, month, year)
        out = []
        for minutes in result:
            out.extend(to_hours_minutes(minutes))
        return tuple(out)  # type: ignore[return-value]

    format_time = staticmethod(format_time)
    format_time_24_with_period = staticmethod(format_time_24_with_period)


__all__ = ["LegacyPrayerTimes"]
