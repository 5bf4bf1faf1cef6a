#!/usr/bin/env python3
"""Compute prayer times from the command line.

-------------------------------------------------------------------------------
Available subcommands
-------------------------------------------------------------------------------
times      Print the six times for one date.
timetable  Compute a multi-day timetable, write it as TSV (and optionally PNG).
methods    List the named calculation methods.

-------------------------------------------------------------------------------
Command-line usage examples
-------------------------------------------------------------------------------
1. One day, location given on the command line:

   python scripts/prayer_times_cli.py times --lat 21.4225 --lon 39.8262 \
       --tz-hours 3 --method UmmAlQura --date 2025-03-21

2. One day from a run file (config/runs/makkah.toml):

   python scripts/prayer_times_cli.py times --run makkah --date 2025-03-21

3. A year-long timetable with a plot:

   python scripts/prayer_times_cli.py timetable --run oslo \
       --start 2025-01-01 --days 365 --out output/oslo_2025.tsv \
       --plot output/oslo_2025.png

   A run log is written to logs/run_<UTC stamp>.log.

-------------------------------------------------------------------------------
Configuration
-------------------------------------------------------------------------------
Run files may reference a site file and a profile file:

   include_site = "config/sites/oslo.toml"
   include_profile = "config/profiles/mwl_middle_of_night.toml"

Merge order is site -> profile -> run, then --set overrides, then the
shortcut flags (--lat, --lon, --tz-hours, --tz-minutes, --method, --asr,
--high-lat), which are plain --set overrides under the hood.
"""

from __future__ import annotations

import argparse
import os
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Tuple

from solar_prayer.core.config_loader import (
    dump_effective_config,
    load_run_config,
    location_from_config,
    profile_from_config,
)
from solar_prayer.core.engine import PrayerTimesCalculator
from solar_prayer.core.model import PRAYER_NAMES
from solar_prayer.output.formatting import (
    format_hhmm,
    format_time,
    to_hours_minutes,
)
from solar_prayer.output.timetable import (
    TimetableMetadata,
    build_timetable,
    plot_timetable,
    write_timetable_tsv,
)
from solar_prayer.profiles.methods import NAMED_METHODS

SOFTWARE_VERSION = "0.1.0"


# -----
# Helpers
# -----

def _parse_date(text: str) -> date:
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got '{text}'")


def _shortcut_sets(args: argparse.Namespace) -> List[str]:
    sets: List[str] = []
    pairs = [
        ("lat", "site.latitude_deg"),
        ("lon", "site.longitude_deg"),
        ("tz_minutes", "site.timezone_minutes"),
        ("name", "site.name"),
        ("method", "profile.method"),
        ("asr", "profile.asr"),
        ("high_lat", "profile.high_latitude_rule"),
    ]
    for attr, key in pairs:
        val = getattr(args, attr, None)
        if val is not None:
            sets.append(f"{key}={val}")
    # --tz-hours overrides site.timezone_minutes as well.
    if getattr(args, "tz_hours", None) is not None:
        sets.append(f"site.timezone_minutes={args.tz_hours * 60.0}")
    return sets


def _load_config(args: argparse.Namespace) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    return load_run_config(
        project_root=os.getcwd(),
        run_name=args.run,
        run_path=args.run_config,
        set_overrides=list(args.set) + _shortcut_sets(args),
    )


def _build_calculator(cfg: Dict[str, Any]) -> PrayerTimesCalculator:
    backend = str(cfg.get("ephemeris", {}).get("backend", "approximate"))
    return PrayerTimesCalculator(
        location_from_config(cfg),
        profile_from_config(cfg),
        ephemeris_backend=backend,
    )


def _init_logger(project_root: str, log_dir: str) -> Tuple[str, Any]:
    os.makedirs(os.path.join(project_root, log_dir), exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")
    path = os.path.join(project_root, log_dir, f"run_{stamp}.log")

    def _log(msg: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(msg.rstrip() + "\n")

    return path, _log


def _log_header(log, project_root: str, paths: Dict[str, Any], cfg: Dict[str, Any]):
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    log(f"[{now}] Run started")
    log(f"Project root: {project_root}")
    for key, label in (
        ("run_path", "Run config"),
        ("site_path", "Site config"),
        ("profile_path", "Profile config"),
    ):
        if paths.get(key):
            log(f"{label}: {os.path.relpath(paths[key], project_root)}")
    log("")
    log("----- Effective configuration -----")
    log(dump_effective_config(cfg).rstrip())
    log("-----------------------------------")
    log("")


# -----
# Commands
# -----

def cmd_times(args: argparse.Namespace) -> int:
    try:
        cfg, _ = _load_config(args)
        if args.dump_effective_config:
            print(dump_effective_config(cfg).rstrip())
            return 0
        calc = _build_calculator(cfg)
    except (ValueError, KeyError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 2

    d = args.date or date.today()
    res = calc.compute_date(d)
    where = calc.location.name or (
        f"{calc.location.latitude_deg:.4f}, {calc.location.longitude_deg:.4f}"
    )
    print(f"{d.isoformat()}  {where}  ({calc.profile.method_name})")
    for name, minutes in zip(PRAYER_NAMES, res):
        if args.clock == "12h":
            text = format_time(*to_hours_minutes(minutes))
        else:
            text = format_hhmm(minutes)
        print(f"{name.capitalize():<8} {text}")
    for w in res.warnings:
        print(f"WARNING: {w}")
    return 0


def cmd_timetable(args: argparse.Namespace) -> int:
    project_root = os.getcwd()
    try:
        if args.days <= 0:
            raise ValueError(f"--days must be > 0, got {args.days}")
        cfg, paths = _load_config(args)
        if args.dump_effective_config:
            print(dump_effective_config(cfg).rstrip())
            return 0
        calc = _build_calculator(cfg)
    except (ValueError, KeyError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 2

    log_path, log = _init_logger(project_root, args.log_dir)
    _log_header(log, project_root, paths, cfg)
    print(f"Log file: {os.path.relpath(log_path, project_root)}")

    start = args.start or date.today()
    msg = f"Computing {args.days} days from {start.isoformat()}"
    print(msg); log(msg)
    frame = build_timetable(calc, start, args.days)

    invalid = frame.loc[~frame["valid"], ["date", "warnings"]]
    for _, row in invalid.iterrows():
        log(f"WARNING {row['date'].date().isoformat()}: {row['warnings']}")
    if len(invalid):
        print(f"{len(invalid)} day(s) flagged invalid, see log")

    out_cfg = cfg.get("output", {})
    out_path = args.out or out_cfg.get("out_tsv", "")
    if not out_path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")
        out_path = os.path.join(
            out_cfg.get("out_dir", "output"), f"timetable_{stamp}.tsv"
        )
    if not os.path.isabs(out_path):
        out_path = os.path.join(project_root, out_path)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)

    md = TimetableMetadata.from_calculator(calc, software_version=SOFTWARE_VERSION)
    write_timetable_tsv(out_path, md, frame, append=args.append)
    msg = f"Output TSV: {os.path.relpath(out_path, project_root)}"
    print(msg); log(msg)

    if args.plot:
        plot_path = args.plot
        if not os.path.isabs(plot_path):
            plot_path = os.path.join(project_root, plot_path)
        os.makedirs(os.path.dirname(plot_path) or ".", exist_ok=True)
        plot_timetable(frame, plot_path, title=md.location)
        msg = f"Plot: {os.path.relpath(plot_path, project_root)}"
        print(msg); log(msg)

    log("Done.")
    print("Done.")
    return 0


def cmd_methods(args: argparse.Namespace) -> int:
    for d in NAMED_METHODS.values():
        if d.isha_is_interval:
            isha = f"{d.isha_interval} min after maghrib"
        else:
            isha = f"{d.isha_angle:g} deg"
        print(f"{d.name:<10} fajr {d.fajr_angle:g} deg, isha {isha}  ({d.description})")
    return 0


# ----
# Main
# ----

def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--run", help="Run name, resolves to config/runs/<name>.toml")
    p.add_argument("--run-config", help="Explicit run file path (TOML)")
    p.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override config key=value (repeatable).",
    )
    p.add_argument("--lat", type=float, help="Latitude in degrees (north positive)")
    p.add_argument("--lon", type=float, help="Longitude in degrees (east positive)")
    tz = p.add_mutually_exclusive_group()
    tz.add_argument("--tz-hours", type=float, help="UTC offset in hours")
    tz.add_argument("--tz-minutes", type=float, help="UTC offset in minutes")
    p.add_argument("--name", help="Place name used in reports")
    p.add_argument("--method", help="Named calculation method (see `methods`)")
    p.add_argument("--asr", choices=["standard", "hanafi"], help="Asr convention")
    p.add_argument(
        "--high-lat",
        choices=["none", "middle-of-night", "one-seventh", "angle-based"],
        help="High-latitude rule",
    )
    p.add_argument(
        "--dump-effective-config",
        action="store_true",
        help="Print final merged config and exit.",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="prayer_times_cli",
        description="Islamic prayer times from solar geometry",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="command", required=True)

    pt = sub.add_parser(
        "times",
        help="Print the six times for one date",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_config_args(pt)
    pt.add_argument("--date", type=_parse_date, help="YYYY-MM-DD (default: today)")
    pt.add_argument("--clock", choices=["24h", "12h"], default="24h")
    pt.set_defaults(func=cmd_times)

    pp = sub.add_parser(
        "timetable",
        help="Write a multi-day timetable TSV",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_config_args(pp)
    pp.add_argument("--start", type=_parse_date, help="First day (default: today)")
    pp.add_argument("--days", type=int, default=30, help="Number of days")
    pp.add_argument("--out", default=None, help="Output TSV path")
    pp.add_argument(
        "--append",
        action="store_true",
        help="Append to an existing TSV instead of replacing it",
    )
    pp.add_argument("--plot", default=None, help="Optional PNG path for a plot")
    pp.add_argument(
        "--log-dir",
        default="logs",
        help="Directory where the run log will be created.",
    )
    pp.set_defaults(func=cmd_timetable)

    pm = sub.add_parser("methods", help="List named calculation methods")
    pm.set_defaults(func=cmd_methods)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
