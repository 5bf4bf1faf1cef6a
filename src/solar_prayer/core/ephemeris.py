from __future__ import annotations

"""
ephemeris.py
============
Sun position for prayer-time work: equation of time, declination, solar noon.

Two backends sit behind `solar_parameters`:

- ``"approximate"`` (default): a low-precision analytic model. Mean longitude
  and mean anomaly grow linearly with the day count from J2000.0, a
  three-term equation of center gives the true longitude, and the equation
  of time follows from the ``y = tan^2(eps / 2)`` series. Good to about a
  minute of time, which is what civil prayer tables need.
- ``"astropy"``: full-precision apparent Sun from ``astropy``. Slow, and only
  used as a reference (tests, one-off checks).

All evaluations are at 12:00 UT of the requested day.
"""

import math
from typing import Optional

from .model import SolarParameters

# Fixed obliquity of the ecliptic.
OBLIQUITY_DEG = 23.44

# Reference year used when the caller only knows the day of year.
DEFAULT_YEAR = 2000


def _days_before_year(year: int) -> int:
    """Days from 1 Jan of year 1 to 1 Jan of `year`, proleptic Gregorian."""
    p = year - 1
    return 365 * p + p // 4 - p // 100 + p // 400


_J2000_DAYS = _days_before_year(2000)


def days_since_j2000(day_of_year: int, year: Optional[int] = None) -> float:
    """Days from J2000.0 to 12:00 UT of `day_of_year` in `year`."""
    y = DEFAULT_YEAR if year is None else year
    return float(_days_before_year(y) - _J2000_DAYS + day_of_year - 1)


def _approximate(day_of_year: int, year: Optional[int]) -> SolarParameters:
    n = days_since_j2000(day_of_year, year)
    t = n / 36525.0  # Julian centuries

    mean_longitude = math.radians((280.46646 + 36000.76983 * t) % 360.0)
    mean_anomaly = math.radians((357.52911 + 35999.05029 * t) % 360.0)
    eccentricity = 0.016708634 - 0.000042037 * t

    center_deg = (
        (1.914602 - 0.004817 * t) * math.sin(mean_anomaly)
        + (0.019993 - 0.000101 * t) * math.sin(2.0 * mean_anomaly)
        + 0.000289 * math.sin(3.0 * mean_anomaly)
    )
    true_longitude = mean_longitude + math.radians(center_deg)

    eps = math.radians(OBLIQUITY_DEG)
    declination = math.asin(math.sin(true_longitude) * math.sin(eps))

    y = math.tan(eps / 2.0) ** 2
    e = eccentricity
    m = mean_anomaly
    el = mean_longitude
    eot_rad = (
        y * math.sin(2.0 * el)
        - 2.0 * e * math.sin(m)
        + 4.0 * e * y * math.sin(m) * math.cos(2.0 * el)
        - 0.5 * y * y * math.sin(4.0 * el)
        - 1.25 * e * e * math.sin(2.0 * m)
    )
    # 1 degree of hour angle = 4 minutes of time.
    eot_minutes = math.degrees(eot_rad) * 4.0
    return SolarParameters(day_of_year, eot_minutes, declination)


def _astropy(day_of_year: int, year: Optional[int]) -> SolarParameters:
    if year is None:
        raise ValueError("The 'astropy' ephemeris backend needs an explicit year.")

    import astropy.units as u
    from astropy.coordinates import TETE, get_sun
    from astropy.time import Time

    t = Time(f"{year:04d}-01-01T12:00:00", scale="utc") + (day_of_year - 1) * u.day
    sun = get_sun(t).transform_to(TETE(obstime=t))

    tc = (t.tt.jd - 2451545.0) / 36525.0
    mean_longitude_deg = (280.46646 + 36000.76983 * tc + 0.0003032 * tc * tc) % 360.0
    eot_deg = mean_longitude_deg - 0.0057183 - float(sun.ra.to_value(u.deg))
    eot_deg = (eot_deg + 180.0) % 360.0 - 180.0

    return SolarParameters(
        day_of_year,
        eot_deg * 4.0,
        float(sun.dec.to_value(u.rad)),
    )


_BACKENDS = {
    "approximate": _approximate,
    "astropy": _astropy,
}


def solar_parameters(
    day_of_year: int,
    year: Optional[int] = None,
    backend: str = "approximate",
) -> SolarParameters:
    """Return equation of time (minutes) and declination (radians).

    Parameters
    ----------
    day_of_year : int
        Ordinal day, 1..366.
    year : int, optional
        Gregorian year. Improves the approximate model by a fraction of a
        minute across the leap cycle; required by ``"astropy"``.
    backend : {"approximate", "astropy"}
        Ephemeris implementation.
    """
    try:
        fn = _BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unsupported ephemeris backend: {backend}") from None
    return fn(day_of_year, year)


def solar_noon(
    longitude_deg: float,
    equation_of_time: float,
    timezone_minutes: float,
) -> float:
    """Local clock time of the Sun's transit, in minutes since midnight.

    Longitude is east positive and the timezone offset is east-of-UTC
    positive, so ``720 - 4*lon + tz`` is the mean-sun transit on the zone's
    clock. Equivalent to ``720 - 4*(lon - 15*tz_hours)``.
    """
    return 720.0 - 4.0 * longitude_deg - equation_of_time + timezone_minutes


__all__ = [
    "OBLIQUITY_DEG",
    "DEFAULT_YEAR",
    "days_since_j2000",
    "solar_parameters",
    "solar_noon",
]
