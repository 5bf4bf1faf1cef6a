"""
output.timetable
================

Multi-day prayer timetables: build them, write/read them as TSV, plot them.

What this module provides
-------------------------
- `build_timetable(calculator, start, days)`: run the engine for consecutive
  days and return a `pandas.DataFrame` (times in minutes since midnight).
- `TimetableMetadata`: file-level metadata written as commented header lines.
- `write_timetable_tsv(path, metadata, frame, append=True)`: write or append
  a TSV file with a fixed column schema.
- `read_timetable_tsv(path)`: read such a file back into minutes.
- `plot_timetable(frame, path)`: save a PNG with one curve per prayer.
- `SchemaMismatchError`: raised when appending to a file whose column header
  does not match the expected schema.

File format
-----------
1) A commented metadata block (lines starting with '#'):
   location, coordinates, timezone, calculation choices, provenance.
2) A single header line:
   date, fajr, sunrise, dhuhr, asr, maghrib, isha, valid
3) One row per day, tab separated. Dates are ISO ``YYYY-MM-DD``, times are
   ``HH:MM`` (24-hour, rounded to the minute), `valid` is ``true``/``false``.

Robustness and guarantees
-------------------------
- Appending validates the on-disk header first (`SchemaMismatchError`).
- Blank lines between the metadata block and the header are tolerated.
- Overwriting (`append=False`) writes to ``path + ".tmp"`` and then replaces
  the target via `os.replace`.

Example
-------
>>> from datetime import date
>>> calc = PrayerTimesCalculator(GeoLocation(21.4225, 39.8262, 180, "Makkah"))
>>> frame = build_timetable(calc, date(2025, 1, 1), days=31)
>>> md = TimetableMetadata.from_calculator(calc, software_version="0.1.0")
>>> write_timetable_tsv("makkah_jan.tsv", md, frame, append=False)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, TextIO
import os

import numpy as np
import pandas as pd

from solar_prayer.core.engine import PrayerTimesCalculator
from solar_prayer.core.model import PRAYER_NAMES

__all__ = [
    "TimetableMetadata",
    "SchemaMismatchError",
    "build_timetable",
    "minutes_to_hhmm",
    "write_timetable_tsv",
    "read_timetable_tsv",
    "plot_timetable",
]


# =============================================================================
# Exceptions
# =============================================================================


class SchemaMismatchError(ValueError):
    """
    Raised when appending to an existing file whose column header line does not
    match the expected timetable schema.

    The exception message includes the file path, the expected header and the
    found header.
    """

    pass


# =============================================================================
# Data models
# =============================================================================


@dataclass(frozen=True)
class TimetableMetadata:
    """
    Container for file-level metadata written as commented header lines.

    Attributes
    ----------
    location : str
        Free-form place name (e.g., "Makkah").
    latitude_deg, longitude_deg : float
        Coordinates in degrees (north/east positive).
    timezone_minutes : float
        Offset from UTC in minutes.
    method : str
        Calculation method name, or "custom".
    asr_method : str
        "standard" or "hanafi".
    high_latitude_rule : str
        Rule name as in `HighLatitudeRule`.
    software_version : str
        Software version string used to generate the file.
    created_at_iso : Optional[str], default None
        ISO 8601 creation instant. If None, current UTC time is used.
    """

    location: str
    latitude_deg: float
    longitude_deg: float
    timezone_minutes: float
    method: str
    asr_method: str
    high_latitude_rule: str
    software_version: str
    created_at_iso: Optional[str] = None

    @classmethod
    def from_calculator(
        cls,
        calculator: PrayerTimesCalculator,
        software_version: str,
        created_at_iso: Optional[str] = None,
    ) -> "TimetableMetadata":
        loc = calculator.location
        prof = calculator.profile
        return cls(
            location=loc.name or "Unknown",
            latitude_deg=loc.latitude_deg,
            longitude_deg=loc.longitude_deg,
            timezone_minutes=loc.timezone_minutes,
            method=prof.method_name,
            asr_method=prof.asr_method.name.lower(),
            high_latitude_rule=prof.high_latitude_rule.value,
            software_version=software_version,
            created_at_iso=created_at_iso,
        )


# =============================================================================
# Public API
# =============================================================================


def build_timetable(
    calculator: PrayerTimesCalculator,
    start: date,
    days: int,
) -> pd.DataFrame:
    """
    Compute prayer times for `days` consecutive days starting at `start`.

    Returns
    -------
    pandas.DataFrame
        Columns: ``date`` (Timestamp), the six prayer columns (float minutes
        in [0, 1440)), ``valid`` (bool) and ``warnings`` (str, "; "-joined).
    """
    if days <= 0:
        raise ValueError(f"days must be > 0, got {days}")

    records = []
    for ts in pd.date_range(start=pd.Timestamp(start), periods=days, freq="D"):
        res = calculator.compute(ts.day, ts.month, ts.year)
        rec = {"date": ts}
        rec.update(res.as_dict())
        rec["valid"] = res.valid
        rec["warnings"] = "; ".join(res.warnings)
        records.append(rec)

    return pd.DataFrame.from_records(
        records, columns=["date", *PRAYER_NAMES, "valid", "warnings"]
    )


def minutes_to_hhmm(values) -> np.ndarray:
    """
    Vectorized minute-of-day -> ``"HH:MM"``.

    Values are wrapped into a day and rounded to the nearest minute before
    splitting, so 1439.6 gives "00:00".
    """
    m = np.asarray(values, dtype=float)
    total = np.rint(np.mod(m, 1440.0)).astype(np.int64) % 1440
    hours, minutes = np.divmod(total, 60)
    return np.array(
        [f"{h:02d}:{mm:02d}" for h, mm in zip(hours.ravel(), minutes.ravel())],
        dtype=object,
    ).reshape(m.shape)


def write_timetable_tsv(
    path: str,
    metadata: TimetableMetadata,
    frame: pd.DataFrame,
    append: bool = True,
) -> None:
    """
    Write (or append) a timetable TSV with a commented metadata block and a
    fixed column header.

    Behavior
    --------
    - If the file does not exist: metadata block, header, rows.
    - If the file exists and `append=True`: validate the header, then append.
    - If `append=False`: overwrite atomically (``.tmp`` + `os.replace`).

    Raises
    ------
    SchemaMismatchError
        When appending to a file whose header does not match the schema.
    ValueError
        If `frame` lacks required columns, or the existing file has no header.
    """
    missing = [c for c in ["date", *PRAYER_NAMES, "valid"] if c not in frame.columns]
    if missing:
        raise ValueError(f"Timetable frame is missing columns: {missing}")

    lines = _frame_to_lines(frame)

    if not append:
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", newline="", encoding="utf-8") as f:
            _write_metadata_block(f, metadata)
            _write_column_header(f)
            f.writelines(lines)
        os.replace(tmp_path, path)
        return

    creating_new = not os.path.exists(path)
    mode = "w" if creating_new else "a"
    if not creating_new:
        _check_header_or_raise(path)
    with open(path, mode, newline="", encoding="utf-8") as f:
        if creating_new:
            _write_metadata_block(f, metadata)
            _write_column_header(f)
        f.writelines(lines)


def read_timetable_tsv(path: str) -> pd.DataFrame:
    """
    Read a timetable TSV back into a frame with times in minutes.

    Comment lines are ignored. ``date`` becomes a Timestamp column and
    ``valid`` a bool column.
    """
    df = pd.read_csv(
        path,
        sep="\t",
        comment="#",
        dtype=str,
        keep_default_na=False,
    )
    df.columns = [c.strip() for c in df.columns]

    missing = [c for c in _expected_columns() if c not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns {missing} in '{path}'. "
            f"Found columns: {list(df.columns)}"
        )

    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
    for name in PRAYER_NAMES:
        df[name] = df[name].map(_hhmm_to_minutes).astype(float)
    df["valid"] = df["valid"].str.strip().str.lower() == "true"
    return df[_expected_columns()]


def plot_timetable(
    frame: pd.DataFrame,
    path: str,
    title: Optional[str] = None,
) -> None:
    """Save a PNG with one line per prayer (hours of day vs date)."""
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(9, 5))
    try:
        for name in PRAYER_NAMES:
            ax.plot(frame["date"], frame[name].to_numpy() / 60.0, label=name)
        ax.set_xlabel("date")
        ax.set_ylabel("local time (h)")
        ax.set_ylim(0, 24)
        ax.set_yticks(range(0, 25, 3))
        ax.grid(True, alpha=0.25)
        ax.legend(loc="best")
        if title:
            ax.set_title(title)
        fig.autofmt_xdate()
        fig.savefig(path, dpi=120, bbox_inches="tight")
    finally:
        plt.close(fig)


# =============================================================================
# Internal helpers
# =============================================================================


def _write_metadata_block(f: TextIO, md: TimetableMetadata) -> None:
    created = md.created_at_iso or datetime.now(timezone.utc).strftime(
        "%Y-%m-%dT%H:%M:%SZ"
    )

    f.write(f"# Location: {md.location}\n")
    f.write(f"# Latitude: {md.latitude_deg} deg\n")
    f.write(f"# Longitude: {md.longitude_deg} deg\n")
    f.write(f"# Timezone offset: {md.timezone_minutes:g} min\n")
    f.write(f"# Method: {md.method}\n")
    f.write(f"# Asr: {md.asr_method}\n")
    f.write(f"# High-latitude rule: {md.high_latitude_rule}\n")

    f.write("# date: ISO 8601 calendar date\n")
    f.write("# fajr..isha: local clock time, HH:MM (24h)\n")
    f.write("# valid: false when a time had no geometric solution\n")

    f.write(f"# Generated with software version: {md.software_version}\n")
    f.write(f"# Created at: {created}\n")
    f.write("\n")


def _write_column_header(f: TextIO) -> None:
    f.write("\t".join(_expected_columns()) + "\n")


def _frame_to_lines(frame: pd.DataFrame) -> list[str]:
    dates = pd.to_datetime(frame["date"]).dt.strftime("%Y-%m-%d").to_numpy()
    cols = [dates]
    for name in PRAYER_NAMES:
        cols.append(minutes_to_hhmm(frame[name].to_numpy()))
    cols.append(np.where(frame["valid"].to_numpy(dtype=bool), "true", "false"))
    return ["\t".join(str(v) for v in row) + "\n" for row in zip(*cols)]


def _hhmm_to_minutes(text: str) -> float:
    h, _, m = text.strip().partition(":")
    if not m:
        raise ValueError(f"Expected HH:MM, got '{text}'")
    return float(int(h) * 60 + int(m))


def _expected_columns() -> list[str]:
    """
    The canonical list of column names for the timetable schema.

    Returns
    -------
    list[str]
        ["date", "fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha", "valid"]
    """
    return ["date", *PRAYER_NAMES, "valid"]


def _check_header_or_raise(path: str) -> None:
    """
    Ensure the existing file at `path` has the expected column schema.

    Skips comment and blank lines, reads the first remaining line as the
    header and compares it column by column.
    """
    expected_cols = _expected_columns()
    expected_header = "\t".join(expected_cols)

    header_line: Optional[str] = None
    with open(path, "r", newline="", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            header_line = line
            break

    if header_line is None:
        raise ValueError(f"File '{path}' appears to contain no column header")

    found_cols = header_line.split("\t")
    if found_cols != expected_cols:
        raise SchemaMismatchError(
            "Existing file schema does not match expected header.\n"
            f"Path:     {path}\n"
            f"Expected: {expected_header}\n"
            f"Found:    {header_line}\n"
            "Hint: If you intend to replace the file, "
            "call write_timetable_tsv(..., append=False)."
        )
