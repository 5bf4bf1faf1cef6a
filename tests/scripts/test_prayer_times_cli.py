# tests/scripts/test_prayer_times_cli.py
"""
End-to-end tests for `scripts/prayer_times_cli.py`.

Scope:
- `times`, `timetable` and `methods` commands called through `main()`;
- run-file composition and shortcut flags;
- error paths returning exit code 2;
- one subprocess run to mirror real CLI usage.

Every test runs in its own temporary working directory.
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
from pathlib import Path
from typing import Callable

import pytest

from solar_prayer.output.timetable import read_timetable_tsv

# tests/scripts/test_prayer_times_cli.py -> repo_root = parents[2]
_REPO_ROOT = Path(__file__).resolve().parents[2]
_SCRIPT_PATH = _REPO_ROOT / "scripts" / "prayer_times_cli.py"

# Import the CLI module by filename so tests can call `main()`.
import importlib.util as _importlib_util  # noqa: E402

_spec = _importlib_util.spec_from_file_location("prayer_times_cli_loaded", _SCRIPT_PATH)
_cli = _importlib_util.module_from_spec(_spec)  # type: ignore[arg-type]
assert _spec and _spec.loader
_spec.loader.exec_module(_cli)  # type: ignore[assignment]

main: Callable[..., int] = _cli.main

_TIME_LINE = re.compile(r"^(Fajr|Sunrise|Dhuhr|Asr|Maghrib|Isha)\s+\d{2}:\d{2}$")

SITE = """
[site]
name = "Oslo"
latitude_deg = 59.9139
longitude_deg = 10.7522
timezone_minutes = 60
"""

PROFILE = """
[profile]
method = "MWL"
high_latitude_rule = "middle-of-night"
"""


@pytest.fixture(autouse=True)
def _cwd_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MPLBACKEND", "Agg")


def _times_lines(out: str) -> list[str]:
    return [ln for ln in out.splitlines() if _TIME_LINE.match(ln)]


# -------------------------------------
# times
# -------------------------------------


def test_times_from_flags(capsys):
    rc = main(
        [
            "times",
            "--lat", "21.4225",
            "--lon", "39.8262",
            "--tz-hours", "3",
            "--name", "Makkah",
            "--method", "UmmAlQura",
            "--date", "2025-03-21",
        ]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert out.splitlines()[0] == "2025-03-21  Makkah  (UmmAlQura)"
    assert len(_times_lines(out)) == 6
    assert "WARNING" not in out


def test_times_12h_clock(capsys):
    rc = main(
        ["times", "--lat", "0", "--lon", "0", "--date", "2023-03-21", "--clock", "12h"]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert re.search(r"^Dhuhr\s+12:0\d PM$", out, flags=re.M)


def test_times_from_run_file_with_warnings(tmp_path, write_run_config, capsys):
    write_run_config(tmp_path, SITE, PROFILE, "", name="oslo")
    rc = main(
        ["times", "--run", "oslo", "--high-lat", "none", "--date", "2024-06-21"]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert "Oslo" in out.splitlines()[0]
    assert out.count("WARNING:") == 2


def test_dump_effective_config(tmp_path, write_run_config, capsys):
    write_run_config(tmp_path, SITE, PROFILE, "", name="oslo")
    rc = main(
        ["times", "--run", "oslo", "--set", "profile.asr=hanafi", "--dump-effective-config"]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert 'asr = "hanafi"' in out
    assert 'high_latitude_rule = "middle-of-night"' in out


def test_tz_hours_overrides_site_minutes(tmp_path, write_run_config, capsys):
    write_run_config(tmp_path, SITE, PROFILE, "", name="oslo")
    rc = main(["times", "--run", "oslo", "--tz-hours", "2", "--dump-effective-config"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "timezone_minutes = 120.0" in out


@pytest.mark.parametrize(
    "argv, needle",
    [
        (["times", "--lat", "0"], "longitude_deg"),
        (["times", "--lat", "95", "--lon", "0"], "latitude_deg"),
        (["times", "--lat", "0", "--lon", "0", "--method", "Atlantis"], "Atlantis"),
        (["times", "--run", "missing"], "Run file not found"),
    ],
)
def test_times_errors(argv, needle, capsys):
    rc = main(argv)
    out = capsys.readouterr().out
    assert rc == 2
    assert out.startswith("ERROR:")
    assert needle in out


def test_bad_date_is_an_argparse_error():
    with pytest.raises(SystemExit):
        main(["times", "--lat", "0", "--lon", "0", "--date", "21/03/2025"])


# -------------------------------------
# timetable
# -------------------------------------


def test_timetable_writes_tsv_plot_and_log(tmp_path, write_run_config, capsys):
    write_run_config(tmp_path, SITE, PROFILE, "", name="oslo")
    rc = main(
        [
            "timetable",
            "--run", "oslo",
            "--start", "2024-06-01",
            "--days", "30",
            "--out", "output/oslo.tsv",
            "--plot", "output/oslo.png",
        ]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert "Output TSV: output/oslo.tsv" in out
    assert "Plot: output/oslo.png" in out
    assert out.rstrip().endswith("Done.")

    frame = read_timetable_tsv(str(tmp_path / "output" / "oslo.tsv"))
    assert len(frame) == 30
    assert frame["valid"].all()
    assert (tmp_path / "output" / "oslo.png").exists()

    logs = list((tmp_path / "logs").glob("run_*.log"))
    assert len(logs) == 1
    log_text = logs[0].read_text(encoding="utf-8")
    assert "Run config: config/runs/oslo.toml" in log_text
    assert "----- Effective configuration -----" in log_text
    assert "Done." in log_text


def test_timetable_logs_invalid_days(tmp_path, write_run_config, capsys):
    write_run_config(tmp_path, SITE, PROFILE, "", name="oslo")
    rc = main(
        [
            "timetable",
            "--run", "oslo",
            "--high-lat", "none",
            "--start", "2024-06-20",
            "--days", "3",
            "--out", "oslo.tsv",
        ]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert "3 day(s) flagged invalid" in out
    log_text = next((tmp_path / "logs").glob("run_*.log")).read_text(encoding="utf-8")
    assert "WARNING 2024-06-21:" in log_text


def test_timetable_default_output_dir(tmp_path, capsys):
    rc = main(
        ["timetable", "--lat", "0", "--lon", "0", "--start", "2025-01-01", "--days", "2"]
    )
    assert rc == 0
    produced = list((tmp_path / "output").glob("timetable_*.tsv"))
    assert len(produced) == 1


def test_timetable_append(tmp_path, capsys):
    base = ["timetable", "--lat", "0", "--lon", "0", "--out", "t.tsv", "--days", "2"]
    assert main(base + ["--start", "2025-01-01"]) == 0
    assert main(base + ["--start", "2025-01-03", "--append"]) == 0
    assert len(read_timetable_tsv(str(tmp_path / "t.tsv"))) == 4
    assert main(base + ["--start", "2025-01-05"]) == 0
    assert len(read_timetable_tsv(str(tmp_path / "t.tsv"))) == 2


def test_timetable_rejects_non_positive_days(capsys):
    rc = main(["timetable", "--lat", "0", "--lon", "0", "--days", "0"])
    assert rc == 2
    assert "--days must be > 0" in capsys.readouterr().out


# -------------------------------------
# methods
# -------------------------------------


def test_methods_lists_registry(capsys):
    assert main(["methods"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith("MWL")
    assert "UmmAlQura" in out
    assert "90 min after maghrib" in out


# -------------------------------------
# Subprocess
# -------------------------------------


def test_cli_subprocess_times(tmp_path):
    env = os.environ.copy()
    src_dir = str(_REPO_ROOT / "src")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [env.get("PYTHONPATH", ""), src_dir]))
    cp = subprocess.run(
        [
            sys.executable,
            str(_SCRIPT_PATH),
            "times",
            "--lat", "51.5074",
            "--lon", "-0.1278",
            "--tz-minutes", "60",
            "--date", "2024-06-21",
        ],
        cwd=str(tmp_path),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    assert cp.returncode == 0, cp.stderr
    assert len(_times_lines(cp.stdout)) == 6
