from __future__ import annotations

"""
hour_angle.py
=============
Hour-angle solving for a target solar altitude, and the Asr shadow geometry.

Every inverse cosine takes a clamped argument. When the Sun never reaches the
requested altitude (polar day/night, deep summer twilight) the clamp picks
the nearest reachable boundary: transit (H = 0) or anti-transit (H = 180 deg).
Use `has_solution` to tell that case apart.
"""

import math

# Sun's upper limb on the horizon: 34' refraction plus 16' semi-diameter.
SUNRISE_ALTITUDE_DEG = -0.833

# Minutes of time per degree of hour angle.
MINUTES_PER_DEGREE = 4.0


def clamp_unit(x: float) -> float:
    """Clamp `x` into [-1, 1]."""
    return max(-1.0, min(1.0, x))


def cos_hour_angle(altitude_deg: float, latitude_deg: float, declination: float) -> float:
    """Unclamped cosine of the hour angle at which the Sun has `altitude_deg`."""
    phi = math.radians(latitude_deg)
    num = math.sin(math.radians(altitude_deg)) - math.sin(phi) * math.sin(declination)
    den = math.cos(phi) * math.cos(declination)
    if den == 0.0:
        # At the poles the altitude never changes over the day.
        return math.copysign(math.inf, num) if num else 1.0
    return num / den


def has_solution(altitude_deg: float, latitude_deg: float, declination: float) -> bool:
    """True when the Sun actually crosses `altitude_deg` on this day."""
    return abs(cos_hour_angle(altitude_deg, latitude_deg, declination)) <= 1.0


def hour_angle_minutes(
    altitude_deg: float, latitude_deg: float, declination: float
) -> float:
    """Time between transit and the crossing of `altitude_deg`, in minutes."""
    c = clamp_unit(cos_hour_angle(altitude_deg, latitude_deg, declination))
    return math.degrees(math.acos(c)) * MINUTES_PER_DEGREE


def time_for_angle(
    altitude_deg: float,
    noon: float,
    latitude_deg: float,
    declination: float,
    morning: bool,
) -> float:
    """Clock time at which the Sun crosses `altitude_deg`.

    Parameters
    ----------
    altitude_deg : float
        Target altitude, negative below the horizon (e.g. -18 for Fajr).
    noon : float
        Solar transit in minutes since midnight.
    latitude_deg : float
        Observer latitude.
    declination : float
        Solar declination in radians.
    morning : bool
        Rising side when True, setting side otherwise.
    """
    delta = hour_angle_minutes(altitude_deg, latitude_deg, declination)
    return noon - delta if morning else noon + delta


def asr_altitude(latitude_deg: float, declination: float, shadow_factor: float) -> float:
    """Solar altitude (deg) at which a gnomon's shadow reaches the Asr length.

    The shadow must equal `shadow_factor` times the object plus its noon
    shadow: cot(h) = k + tan(|phi - dec|).
    """
    zenith_at_noon = abs(math.radians(latitude_deg) - declination)
    cot_h = shadow_factor + math.tan(zenith_at_noon)
    if cot_h == 0.0:
        return 90.0
    return math.degrees(math.atan(1.0 / cot_h))


def asr_time(
    noon: float,
    latitude_deg: float,
    declination: float,
    shadow_factor: float,
) -> float:
    altitude = asr_altitude(latitude_deg, declination, shadow_factor)
    return time_for_angle(altitude, noon, latitude_deg, declination, morning=False)


__all__ = [
    "SUNRISE_ALTITUDE_DEG",
    "MINUTES_PER_DEGREE",
    "clamp_unit",
    "cos_hour_angle",
    "has_solution",
    "hour_angle_minutes",
    "time_for_angle",
    "asr_altitude",
    "asr_time",
]
