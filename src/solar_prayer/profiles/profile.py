from __future__ import annotations

"""
profile.py
==========
Calculation profile: every jurisprudential choice the engine reads.

A profile is a plain mutable value. Setters exist for callers that tune a
profile in place (e.g. the legacy adapter); the engine only reads it. Do not
mutate a profile while a calculation on it is running in another thread.

Isha is either angle-based or interval-based, never both. The setters keep
that invariant: `set_isha_angle` clears the interval and `set_isha_interval`
clears the angle.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from solar_prayer.core.model import PRAYER_NAMES, AsrMethod, HighLatitudeRule
from .methods import DEFAULT_METHOD, MethodDefinition, get_method


# Manual per-prayer corrections in minutes (positive = later).
@dataclass(frozen=True)
class Adjustments:
    fajr: int = 0
    sunrise: int = 0
    dhuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {n: getattr(self, n) for n in PRAYER_NAMES}

    @classmethod
    def from_mapping(cls, values: Dict[str, int]) -> "Adjustments":
        unknown = sorted(set(values) - set(PRAYER_NAMES))
        if unknown:
            raise ValueError(f"Unknown adjustment keys: {', '.join(unknown)}")
        return cls(**{k: int(v) for k, v in values.items()})


@dataclass
class CalculationProfile:
    # Fajr depression angle in degrees (positive number, below horizon).
    fajr_angle: float = 18.0
    # Isha depression angle in degrees; None when Isha is interval-based.
    isha_angle: Optional[float] = 17.0
    # Minutes after Maghrib; None when Isha is angle-based.
    isha_interval: Optional[int] = None
    asr_method: AsrMethod = AsrMethod.STANDARD
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.NONE
    adjustments: Adjustments = field(default_factory=Adjustments)
    # Daylight saving shift added to every output, in minutes.
    dst_minutes: int = 0
    # Name of the method the angles came from, or "custom".
    method_name: str = DEFAULT_METHOD

    def __post_init__(self) -> None:
        self.asr_method = AsrMethod.parse(self.asr_method)
        self.high_latitude_rule = HighLatitudeRule.parse(self.high_latitude_rule)
        self._check_isha()
        if not 0.0 < self.fajr_angle < 90.0:
            raise ValueError(f"fajr_angle must be in (0, 90), got {self.fajr_angle}")

    def _check_isha(self) -> None:
        if (self.isha_angle is None) == (self.isha_interval is None):
            raise ValueError("exactly one of isha_angle / isha_interval must be set")
        if self.isha_angle is not None and not 0.0 < self.isha_angle < 90.0:
            raise ValueError(f"isha_angle must be in (0, 90), got {self.isha_angle}")
        if self.isha_interval is not None and self.isha_interval < 0:
            raise ValueError(f"isha_interval must be >= 0, got {self.isha_interval}")

    # -------------------------
    # Construction
    # -------------------------

    @classmethod
    def from_method(cls, name: str, **overrides) -> "CalculationProfile":
        """Profile seeded from a named method; keyword overrides win.

        Overriding one Isha setting clears the method's other one, so
        ``from_method("MWL", isha_interval=90)`` gives an interval profile.
        """
        d = get_method(name)
        if overrides.get("isha_interval") is not None:
            overrides.setdefault("isha_angle", None)
        if overrides.get("isha_angle") is not None:
            overrides.setdefault("isha_interval", None)
        base = cls(
            fajr_angle=d.fajr_angle,
            isha_angle=d.isha_angle,
            isha_interval=d.isha_interval,
            method_name=d.name,
        )
        return replace(base, **overrides) if overrides else base

    def copy(self) -> "CalculationProfile":
        return replace(self)

    # -------------------------
    # Derived values
    # -------------------------

    @property
    def isha_is_interval(self) -> bool:
        return self.isha_interval is not None

    @property
    def asr_factor(self) -> int:
        return int(self.asr_method)

    # -------------------------
    # Setters
    # -------------------------

    def set_adjustments(
        self,
        fajr: int = 0,
        sunrise: int = 0,
        dhuhr: int = 0,
        asr: int = 0,
        maghrib: int = 0,
        isha: int = 0,
    ) -> None:
        self.adjustments = Adjustments(fajr, sunrise, dhuhr, asr, maghrib, isha)

    def set_calculation_method(self, name: str) -> None:
        """Load Fajr/Isha settings from a named method, keeping the rest."""
        d: MethodDefinition = get_method(name)
        self.fajr_angle = d.fajr_angle
        self.isha_angle = d.isha_angle
        self.isha_interval = d.isha_interval
        self.method_name = d.name

    def set_asr_method(self, method: AsrMethod | int | str) -> None:
        self.asr_method = AsrMethod.parse(method)

    def set_high_latitude_rule(self, rule: HighLatitudeRule | str) -> None:
        self.high_latitude_rule = HighLatitudeRule.parse(rule)

    def set_fajr_angle(self, angle: float) -> None:
        if not 0.0 < angle < 90.0:
            raise ValueError(f"fajr_angle must be in (0, 90), got {angle}")
        self.fajr_angle = float(angle)
        self.method_name = "custom"

    def set_isha_angle(self, angle: float) -> None:
        if not 0.0 < angle < 90.0:
            raise ValueError(f"isha_angle must be in (0, 90), got {angle}")
        self.isha_angle = float(angle)
        self.isha_interval = None
        self.method_name = "custom"

    def set_isha_interval(self, minutes: int) -> None:
        if minutes < 0:
            raise ValueError(f"isha_interval must be >= 0, got {minutes}")
        self.isha_interval = int(minutes)
        self.isha_angle = None
        self.method_name = "custom"

    def set_dst(self, on: bool) -> None:
        self.dst_minutes = 60 if on else 0

    def set_dst_minutes(self, minutes: int) -> None:
        self.dst_minutes = int(minutes)


__all__ = ["Adjustments", "CalculationProfile"]
