from __future__ import annotations

"""
methods.py
==========
Read-only table of named regional calculation methods.

Each entry fixes the Fajr depression angle and either an Isha depression
angle or a fixed Isha interval after Maghrib. Asr convention, high-latitude
rule and manual offsets are not part of a method; they live on the profile.

The table is built once at import and exposed as a read-only mapping keyed by
the canonical method name. Use `get_method` for case-insensitive lookups.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


class UnknownMethodError(KeyError):
    """Raised when a calculation method name is not in the registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


@dataclass(frozen=True)
class MethodDefinition:
    name: str
    description: str
    fajr_angle: float
    isha_angle: Optional[float] = None
    isha_interval: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.isha_angle is None) == (self.isha_interval is None):
            raise ValueError(
                f"{self.name}: exactly one of isha_angle / isha_interval is required"
            )

    @property
    def isha_is_interval(self) -> bool:
        return self.isha_interval is not None


def _build(defs: Iterable[MethodDefinition]) -> Mapping[str, MethodDefinition]:
    table = {}
    for d in defs:
        if d.name in table:
            raise ValueError(f"Duplicate method name: {d.name}")
        table[d.name] = d
    return MappingProxyType(table)


NAMED_METHODS: Mapping[str, MethodDefinition] = _build(
    [
        MethodDefinition("MWL", "Muslim World League", 18.0, isha_angle=17.0),
        MethodDefinition(
            "ISNA", "Islamic Society of North America", 15.0, isha_angle=15.0
        ),
        MethodDefinition(
            "UmmAlQura", "Umm Al-Qura University, Makkah", 18.5, isha_interval=90
        ),
        MethodDefinition(
            "Egyptian", "Egyptian General Authority of Survey", 19.5, isha_angle=17.5
        ),
        MethodDefinition(
            "Karachi", "University of Islamic Sciences, Karachi", 18.0, isha_angle=18.0
        ),
        MethodDefinition(
            "Tehran",
            "Institute of Geophysics, University of Tehran",
            17.7,
            isha_angle=14.0,
        ),
        MethodDefinition(
            "Jafari", "Shia Ithna-Ashari, Leva Institute, Qum", 16.0, isha_angle=14.0
        ),
        MethodDefinition("Gulf", "Gulf Region", 19.5, isha_interval=90),
        MethodDefinition("Kuwait", "Kuwait", 18.0, isha_angle=17.5),
        MethodDefinition("Qatar", "Qatar", 18.0, isha_interval=90),
        MethodDefinition(
            "Singapore", "Majlis Ugama Islam Singapura", 20.0, isha_angle=18.0
        ),
        MethodDefinition(
            "France", "Union des Organisations Islamiques de France", 20.0,
            isha_angle=18.0,
        ),
        MethodDefinition("Turkey", "Diyanet Isleri Baskanligi", 18.0, isha_angle=17.0),
        MethodDefinition(
            "Russia",
            "Spiritual Administration of Muslims of Russia",
            16.0,
            isha_angle=15.0,
        ),
        MethodDefinition("Dubai", "Dubai", 18.2, isha_angle=18.2),
        MethodDefinition(
            "JAKIM", "Jabatan Kemajuan Islam Malaysia", 20.0, isha_angle=18.0
        ),
        MethodDefinition("Tunisia", "Tunisia", 18.0, isha_angle=18.0),
        MethodDefinition("Algeria", "Algeria", 18.0, isha_angle=17.0),
        MethodDefinition(
            "Indonesia", "Kementerian Agama Republik Indonesia", 20.0, isha_angle=18.0
        ),
        MethodDefinition("Morocco", "Morocco", 19.0, isha_angle=17.0),
        MethodDefinition(
            "Portugal", "Comunidade Islamica de Lisboa", 18.0, isha_interval=77
        ),
        MethodDefinition(
            "Jordan",
            "Ministry of Awqaf, Islamic Affairs and Holy Places, Jordan",
            18.0,
            isha_angle=18.0,
        ),
    ]
)

_BY_KEY = MappingProxyType({k.lower(): v for k, v in NAMED_METHODS.items()})

DEFAULT_METHOD = "MWL"


def get_method(name: str) -> MethodDefinition:
    """Look up a method by name, ignoring case and surrounding spaces."""
    try:
        return _BY_KEY[name.strip().lower()]
    except KeyError:
        valid = ", ".join(NAMED_METHODS)
        raise UnknownMethodError(
            f"Unknown calculation method '{name}'. Valid methods: {valid}"
        ) from None


def method_names() -> list[str]:
    return list(NAMED_METHODS)


__all__ = [
    "UnknownMethodError",
    "MethodDefinition",
    "NAMED_METHODS",
    "DEFAULT_METHOD",
    "get_method",
    "method_names",
]
