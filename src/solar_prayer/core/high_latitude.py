from __future__ import annotations

"""
high_latitude.py
================
Post-pass that replaces unusable Fajr/Isha values with a share of the night.

The night runs from Maghrib to the next Sunrise. When the angle-based Fajr
has no solution, lies after Sunrise, or lies more than half a night before
it, Fajr becomes ``sunrise - night * fraction``. Isha is handled the same way
on the evening side. The fraction depends on the rule:

    middle-of-night   1/2
    one-seventh       1/7
    angle-based       angle / 60

This runs after the base solution and never replaces it up front.
"""

from dataclasses import dataclass
from typing import Optional

from .model import MINUTES_PER_DAY, HighLatitudeRule


@dataclass(frozen=True)
class HighLatitudeOutcome:
    fajr: float
    isha: float
    fajr_replaced: bool = False
    isha_replaced: bool = False


def night_length(sunrise: float, maghrib: float) -> float:
    """Minutes from Maghrib to the following Sunrise."""
    night = sunrise - maghrib
    if night < 0:
        night += MINUTES_PER_DAY
    return night


def night_fraction(rule: HighLatitudeRule, angle_deg: Optional[float]) -> float:
    if rule is HighLatitudeRule.MIDDLE_OF_NIGHT:
        return 0.5
    if rule is HighLatitudeRule.ONE_SEVENTH:
        return 1.0 / 7.0
    if rule is HighLatitudeRule.ANGLE_BASED:
        if angle_deg is None:
            raise ValueError("angle-based rule needs a twilight angle")
        return angle_deg / 60.0
    return 0.0


def _needs_replacement(gap: float, night: float, solvable: bool) -> bool:
    return not solvable or gap < 0 or gap > night / 2.0


def correct_high_latitude(
    fajr: float,
    sunrise: float,
    maghrib: float,
    isha: float,
    rule: HighLatitudeRule,
    fajr_angle: float,
    isha_angle: Optional[float],
    fajr_solvable: bool = True,
    isha_solvable: bool = True,
) -> HighLatitudeOutcome:
    """Apply `rule` to a base Fajr/Isha pair.

    `isha_angle` is None for interval-based Isha, which is never replaced.
    `fajr_solvable` / `isha_solvable` are False when the Sun never reaches
    the twilight angle; the clamped value then sits at mid-night and must
    be replaced regardless of the gap test.
    """
    if rule is HighLatitudeRule.NONE:
        return HighLatitudeOutcome(fajr, isha)

    night = night_length(sunrise, maghrib)

    fajr_replaced = False
    if _needs_replacement(sunrise - fajr, night, fajr_solvable):
        fajr = sunrise - night * night_fraction(rule, fajr_angle)
        fajr_replaced = True

    isha_replaced = False
    if isha_angle is not None and _needs_replacement(isha - maghrib, night, isha_solvable):
        isha = maghrib + night * night_fraction(rule, isha_angle)
        isha_replaced = True

    return HighLatitudeOutcome(fajr, isha, fajr_replaced, isha_replaced)


__all__ = [
    "HighLatitudeOutcome",
    "night_length",
    "night_fraction",
    "correct_high_latitude",
]
