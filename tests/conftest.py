from __future__ import annotations
import os
from datetime import date

import pytest
from hypothesis import strategies as st

# Headless plotting for every test run.
os.environ.setdefault("MPLBACKEND", "Agg")

from solar_prayer.core.engine import PrayerTimesCalculator
from solar_prayer.core.model import AsrMethod, GeoLocation, HighLatitudeRule
from solar_prayer.profiles.methods import NAMED_METHODS
from solar_prayer.profiles.profile import CalculationProfile

# ---------- Shared fixtures ----------


@pytest.fixture
def makkah() -> GeoLocation:
    """Makkah, UTC+3 (no DST)."""
    return GeoLocation(21.4225, 39.8262, 180, name="Makkah")


@pytest.fixture
def oslo() -> GeoLocation:
    """Oslo on winter time; twilight never ends around midsummer."""
    return GeoLocation(59.9139, 10.7522, 60, name="Oslo")


@pytest.fixture
def equator() -> GeoLocation:
    return GeoLocation(0.0, 0.0, 0, name="Null Island")


@pytest.fixture
def mwl_profile() -> CalculationProfile:
    """Fajr 18 deg, Isha 17 deg, standard Asr, no offsets."""
    return CalculationProfile.from_method("MWL")


@pytest.fixture
def makkah_calc(makkah) -> PrayerTimesCalculator:
    return PrayerTimesCalculator(makkah, CalculationProfile.from_method("UmmAlQura"))


@pytest.fixture
def write_run_config():
    """Create config/{sites,profiles,runs} TOML files under a root directory."""

    def _writer(root, site: str, profile: str, run: str, name: str = "test") -> str:
        for sub in ("sites", "profiles", "runs"):
            (root / "config" / sub).mkdir(parents=True, exist_ok=True)
        (root / "config" / "sites" / f"{name}.toml").write_text(site, encoding="utf-8")
        (root / "config" / "profiles" / f"{name}.toml").write_text(
            profile, encoding="utf-8"
        )
        run_text = (
            f'include_site = "config/sites/{name}.toml"\n'
            f'include_profile = "config/profiles/{name}.toml"\n' + run
        )
        run_path = root / "config" / "runs" / f"{name}.toml"
        run_path.write_text(run_text, encoding="utf-8")
        return str(run_path)

    return _writer


# ---------- Hypothesis strategies ----------


def dates():
    return st.dates(min_value=date(1901, 1, 1), max_value=date(2099, 12, 31))


def latitudes(limit: float):
    return st.floats(
        min_value=-limit, max_value=limit, allow_nan=False, allow_infinity=False
    )


def longitudes():
    return st.floats(
        min_value=-180.0, max_value=180.0, allow_nan=False, allow_infinity=False
    )


def timezones():
    # Real-world offsets in 15 minute steps, UTC-12 .. UTC+14.
    return st.integers(min_value=-48, max_value=56).map(lambda q: q * 15)


def locations(lat_limit: float):
    return st.builds(
        GeoLocation,
        latitude_deg=latitudes(lat_limit),
        longitude_deg=longitudes(),
        timezone_minutes=timezones(),
    )


def profiles():
    return st.builds(
        CalculationProfile.from_method,
        st.sampled_from(sorted(NAMED_METHODS)),
        asr_method=st.sampled_from(list(AsrMethod)),
        high_latitude_rule=st.sampled_from(list(HighLatitudeRule)),
    )
