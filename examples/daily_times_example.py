"""
daily_times_example.py
======================

Purpose
-------
Minimal example showing how to compute one day of prayer times with
`solar_prayer.core.engine` and print them in both clock styles.

What this example does
----------------------
1) Builds a location (Karachi) and a profile from the named "Karachi" method,
   switched to the Hanafi Asr convention.
2) Computes the six times for a date.
3) Prints them as 24-hour and 12-hour strings, plus any validity warnings.

Usage
-----
    python examples/daily_times_example.py
"""

from solar_prayer.core.engine import PrayerTimesCalculator
from solar_prayer.core.model import PRAYER_NAMES, AsrMethod, GeoLocation
from solar_prayer.output.formatting import format_hhmm, format_time, to_hours_minutes
from solar_prayer.profiles.profile import CalculationProfile


def main() -> None:
    location = GeoLocation.from_hours(24.8607, 67.0011, 5, name="Karachi")
    profile = CalculationProfile.from_method("Karachi")
    profile.set_asr_method(AsrMethod.HANAFI)

    calc = PrayerTimesCalculator(location, profile)
    result = calc.compute(21, 3, 2025)

    print(f"{location.name}, 2025-03-21 ({profile.method_name}, Hanafi Asr)")
    for name, minutes in zip(PRAYER_NAMES, result):
        h, m = to_hours_minutes(minutes)
        print(f"  {name:<8} {format_hhmm(minutes)}   {format_time(h, m)}")
    if not result.valid:
        for w in result.warnings:
            print(f"  warning: {w}")


if __name__ == "__main__":
    main()
