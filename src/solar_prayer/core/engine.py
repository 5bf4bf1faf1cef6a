from __future__ import annotations

"""
engine.py
=========
The prayer-time calculation pipeline.

Stages, in order:

1) day of year from the calendar date,
2) equation of time and declination,
3) solar noon (Dhuhr before offsets),
4) Fajr / Sunrise / Maghrib / angle-based Isha from the hour-angle solver,
   Asr from the shadow geometry, interval Isha from Maghrib,
5) high-latitude post-pass on Fajr and Isha,
6) manual offsets + DST, then wrap into [0, 1440).

Validity
--------
The solver never fails: impossible altitudes are clamped. The result is
flagged ``valid=False`` when a clamp decided an output, i.e. when

- the Sun does not rise or set (Sunrise/Maghrib),
- the Asr shadow length is never reached,
- Fajr or angle-based Isha has no solution and the high-latitude rule did
  not replace it.

Each case adds a line to ``PrayerTimesResult.warnings``.
"""

from datetime import date
from typing import List, Optional, Tuple

from solar_prayer.profiles.profile import CalculationProfile
from .calendar import day_of_year
from .ephemeris import solar_noon, solar_parameters
from .high_latitude import correct_high_latitude
from .hour_angle import (
    SUNRISE_ALTITUDE_DEG,
    asr_altitude,
    asr_time,
    has_solution,
    time_for_angle,
)
from .model import (
    ChronologicalTimes,
    GeoLocation,
    PrayerTimesResult,
    SolarParameters,
)
from .normalize import apply_offsets, normalize_all


class PrayerTimesCalculator:
    """Compute prayer times for one location and profile.

    The calculator holds references, not copies: changes made to `profile`
    through its setters are picked up by the next call.

    Parameters
    ----------
    location : GeoLocation
        Observer position and timezone.
    profile : CalculationProfile, optional
        Calculation choices. Defaults to a fresh MWL/standard profile.
    ephemeris_backend : str
        ``"approximate"`` (default) or ``"astropy"``.
    """

    def __init__(
        self,
        location: GeoLocation,
        profile: Optional[CalculationProfile] = None,
        ephemeris_backend: str = "approximate",
    ) -> None:
        self.location = location
        self.profile = profile if profile is not None else CalculationProfile()
        self.ephemeris_backend = ephemeris_backend

    # -------------------------
    # Public API
    # -------------------------

    def solar_parameters(self, day: int, month: int, year: int) -> SolarParameters:
        doy = day_of_year(day, month, year)
        return solar_parameters(doy, year=year, backend=self.ephemeris_backend)

    def compute(self, day: int, month: int, year: int) -> PrayerTimesResult:
        chrono, warnings = self._compute(day, month, year)
        wrapped = normalize_all(chrono.as_tuple())
        return PrayerTimesResult(
            *wrapped,
            valid=not warnings,
            warnings=tuple(warnings),
        )

    def compute_date(self, d: date) -> PrayerTimesResult:
        return self.compute(d.day, d.month, d.year)

    def compute_chronological(self, day: int, month: int, year: int) -> ChronologicalTimes:
        """Adjusted times before the wrap into [0, 1440)."""
        chrono, _ = self._compute(day, month, year)
        return chrono

    # -------------------------
    # Pipeline
    # -------------------------

    def _compute(
        self, day: int, month: int, year: int
    ) -> Tuple[ChronologicalTimes, List[str]]:
        loc = self.location
        prof = self.profile
        lat = loc.latitude_deg
        warnings: List[str] = []

        sp = self.solar_parameters(day, month, year)
        dec = sp.declination
        noon = solar_noon(loc.longitude_deg, sp.equation_of_time, loc.timezone_minutes)

        fajr = time_for_angle(-prof.fajr_angle, noon, lat, dec, morning=True)
        sunrise = time_for_angle(SUNRISE_ALTITUDE_DEG, noon, lat, dec, morning=True)
        maghrib = time_for_angle(SUNRISE_ALTITUDE_DEG, noon, lat, dec, morning=False)
        if prof.isha_is_interval:
            isha = maghrib + prof.isha_interval
        else:
            isha = time_for_angle(-prof.isha_angle, noon, lat, dec, morning=False)

        asr = asr_time(noon, lat, dec, prof.asr_factor)
        asr_alt = asr_altitude(lat, dec, prof.asr_factor)

        if not has_solution(SUNRISE_ALTITUDE_DEG, lat, dec):
            warnings.append("sun does not rise or set on this day; sunrise/maghrib clamped")
        if not has_solution(asr_alt, lat, dec):
            warnings.append("asr shadow length is never reached; asr clamped")

        fajr_ok = has_solution(-prof.fajr_angle, lat, dec)
        isha_ok = prof.isha_is_interval or has_solution(-prof.isha_angle, lat, dec)

        outcome = correct_high_latitude(
            fajr,
            sunrise,
            maghrib,
            isha,
            prof.high_latitude_rule,
            prof.fajr_angle,
            None if prof.isha_is_interval else prof.isha_angle,
            fajr_solvable=fajr_ok,
            isha_solvable=isha_ok,
        )
        fajr, isha = outcome.fajr, outcome.isha

        if not fajr_ok and not outcome.fajr_replaced:
            warnings.append(
                f"sun does not reach -{prof.fajr_angle:g} deg; fajr clamped"
            )
        if not isha_ok and not outcome.isha_replaced:
            warnings.append(
                f"sun does not reach -{prof.isha_angle:g} deg; isha clamped"
            )

        adjusted = apply_offsets(
            (fajr, sunrise, noon, asr, maghrib, isha),
            prof.adjustments.as_dict(),
            prof.dst_minutes,
        )
        return ChronologicalTimes(*adjusted), warnings


def compute_prayer_times(
    location: GeoLocation,
    profile: CalculationProfile,
    day: int,
    month: int,
    year: int,
) -> PrayerTimesResult:
    """One-shot helper around `PrayerTimesCalculator.compute`."""
    return PrayerTimesCalculator(location, profile).compute(day, month, year)


__all__ = ["PrayerTimesCalculator", "compute_prayer_times"]
