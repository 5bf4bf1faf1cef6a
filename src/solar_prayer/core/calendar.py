from __future__ import annotations

"""Gregorian date to day-of-year conversion."""

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def day_of_year(day: int, month: int, year: int) -> int:
    """Return the ordinal day (1..366) of a Gregorian date.

    Inputs are not validated: 31 April yields the ordinal of 1 May. Callers
    own the calendar checks.
    """
    doy = day
    for i in range(min(month - 1, 12)):
        doy += _MONTH_LENGTHS[i]
        if i == 1 and is_leap_year(year):
            doy += 1
    return doy


__all__ = ["is_leap_year", "day_of_year"]
