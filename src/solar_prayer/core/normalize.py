from __future__ import annotations

"""Offsets and wrap-around for minute-of-day values."""

from typing import Mapping, Tuple

from .model import MINUTES_PER_DAY, PRAYER_NAMES


def normalize_minutes(x: float) -> float:
    """Wrap `x` into [0, 1440).

    Python's ``%`` takes the sign of the divisor, so negative inputs land in
    range directly. A tiny negative value can round up to exactly 1440.0,
    which is folded back to 0.
    """
    r = x % MINUTES_PER_DAY
    if r >= MINUTES_PER_DAY:
        r -= MINUTES_PER_DAY
    return r


def apply_offsets(
    times: Tuple[float, ...],
    adjustments: Mapping[str, float],
    dst_minutes: float = 0.0,
) -> Tuple[float, ...]:
    """Add each prayer's manual minutes and the DST shift, without wrapping.

    `times` follows PRAYER_NAMES order; missing adjustment keys count as 0.
    """
    if len(times) != len(PRAYER_NAMES):
        raise ValueError(f"expected {len(PRAYER_NAMES)} times, got {len(times)}")
    return tuple(
        t + adjustments.get(name, 0) + dst_minutes
        for name, t in zip(PRAYER_NAMES, times)
    )


def normalize_all(times: Tuple[float, ...]) -> Tuple[float, ...]:
    return tuple(normalize_minutes(t) for t in times)


__all__ = ["normalize_minutes", "apply_offsets", "normalize_all"]
