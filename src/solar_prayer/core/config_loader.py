from __future__ import annotations

import os
from typing import Dict, Any, Iterable, Tuple

try:
    import tomllib as toml  # py311+
except ImportError:
    import tomli as toml  # older interpreters

import tomli_w

from .model import GeoLocation
from solar_prayer.profiles.profile import Adjustments, CalculationProfile


def load_toml(path: str) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return toml.load(f)


def merge_dicts(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge_dicts(out[k], v)
        else:
            out[k] = v
    return out


def apply_sets(cfg: Dict[str, Any], sets: Iterable[str]) -> Dict[str, Any]:
    for item in sets:
        if "=" not in item:
            raise ValueError(f"--set requires key=value, got: {item}")
        key, val = item.split("=", 1)
        path = key.strip().split(".")
        cursor = cfg
        for p in path[:-1]:
            if p not in cursor or not isinstance(cursor[p], dict):
                cursor[p] = {}
            cursor = cursor[p]
        cursor[path[-1]] = parse_scalar(val.strip())
    return cfg


def parse_scalar(s: str):
    sl = s.lower()
    if sl in ("true", "false"):
        return sl == "true"
    try:
        if "." in s or "e" in sl:
            return float(s)
        return int(s)
    except ValueError:
        return s


def _resolve_include(project_root: str, ref: str, label: str) -> str:
    path = ref if os.path.isabs(ref) else os.path.join(project_root, ref)
    if not os.path.exists(path):
        raise FileNotFoundError(f"{label} file not found: {path}")
    return path


def load_run_config(
    project_root: str,
    run_name: str | None,
    run_path: str | None,
    set_overrides: Iterable[str] = (),
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Load config by composing site, profile, and run, then apply --set.

    With neither `run_name` nor `run_path` the configuration starts empty and
    only `set_overrides` contribute.
    Returns (effective_cfg, summary_paths); summary_paths contains keys
    run_path, site_path, profile_path.
    """
    summary = {"run_path": None, "site_path": None, "profile_path": None}

    if run_name and run_path:
        raise ValueError("Use either --run or --run-config, not both.")

    if run_name:
        run_path = os.path.join(project_root, "config", "runs", f"{run_name}.toml")

    run_cfg: Dict[str, Any] = {}
    if run_path:
        if not os.path.isabs(run_path):
            run_path = os.path.normpath(os.path.join(project_root, run_path))
        if not os.path.exists(run_path):
            raise FileNotFoundError(
                f"Run file not found: {run_path}. Expected in config/runs for --run."
            )
        run_cfg = load_toml(run_path)
        summary["run_path"] = run_path

    site_cfg: Dict[str, Any] = {}
    profile_cfg: Dict[str, Any] = {}
    site_ref = run_cfg.pop("include_site", None)
    profile_ref = run_cfg.pop("include_profile", None)

    if site_ref:
        site_path = _resolve_include(project_root, site_ref, "Site")
        site_cfg = load_toml(site_path)
        summary["site_path"] = site_path

    if profile_ref:
        profile_path = _resolve_include(project_root, profile_ref, "Profile")
        profile_cfg = load_toml(profile_path)
        summary["profile_path"] = profile_path

    # Merge order: site -> profile -> run
    cfg = merge_dicts(site_cfg, profile_cfg)
    cfg = merge_dicts(cfg, run_cfg)

    # Apply --set overrides last
    cfg = apply_sets(cfg, set_overrides)

    cfg.setdefault("site", {})
    cfg.setdefault("profile", {})
    cfg.setdefault("output", {})

    return cfg, summary


def dump_effective_config(cfg: Dict[str, Any]) -> str:
    return tomli_w.dumps(cfg)


def location_from_config(cfg: Dict[str, Any]) -> GeoLocation:
    """Build a GeoLocation from the ``[site]`` table.

    Keys: name, latitude_deg, longitude_deg and either timezone_minutes or
    timezone_hours.
    """
    site = cfg.get("site", {})
    for key in ("latitude_deg", "longitude_deg"):
        if key not in site:
            raise ValueError(f"Missing site.{key} in configuration")
    if "timezone_minutes" in site:
        tz_minutes = float(site["timezone_minutes"])
    else:
        tz_minutes = float(site.get("timezone_hours", 0.0)) * 60.0
    return GeoLocation(
        latitude_deg=float(site["latitude_deg"]),
        longitude_deg=float(site["longitude_deg"]),
        timezone_minutes=tz_minutes,
        name=str(site.get("name", "")),
    )


def profile_from_config(cfg: Dict[str, Any]) -> CalculationProfile:
    """Build a CalculationProfile from the ``[profile]`` table.

    ``method`` seeds the angles; ``fajr_angle``, ``isha_angle`` and
    ``isha_interval`` override them. ``asr``, ``high_latitude_rule``,
    ``dst_minutes`` and the ``[profile.adjustments]`` table fill the rest.
    """
    pc = cfg.get("profile", {})
    profile = CalculationProfile.from_method(str(pc.get("method", "MWL")))

    if "fajr_angle" in pc:
        profile.set_fajr_angle(float(pc["fajr_angle"]))
    if "isha_angle" in pc and "isha_interval" in pc:
        raise ValueError("Set either profile.isha_angle or profile.isha_interval")
    if "isha_angle" in pc:
        profile.set_isha_angle(float(pc["isha_angle"]))
    if "isha_interval" in pc:
        profile.set_isha_interval(int(pc["isha_interval"]))

    if "asr" in pc:
        profile.set_asr_method(pc["asr"])
    if "high_latitude_rule" in pc:
        profile.set_high_latitude_rule(pc["high_latitude_rule"])
    if "dst_minutes" in pc:
        profile.set_dst_minutes(int(pc["dst_minutes"]))

    adj = pc.get("adjustments", {})
    if adj:
        profile.adjustments = Adjustments.from_mapping(adj)
    return profile
