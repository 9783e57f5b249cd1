"""Tests for the plan_sizes CLI.

Covers:
- JSON summary for a sizes string on custom devices.
- Media queries from a metadata file.
- Text output and error exit codes.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli import plan_sizes
from tests.factories import make_metadata


@pytest.fixture()
def devices_file(tmp_path: Path) -> Path:
    path = tmp_path / "devices.json"
    path.write_text(json.dumps([{"w": 800, "h": 600, "dppx": [2]}, {"w": 400, "h": 300}]), encoding="utf-8")
    return path


@pytest.fixture()
def metadata_file(tmp_path: Path) -> Path:
    metadata = make_metadata([1600, 800, 400])
    payload = {fmt: [a.model_dump(by_alias=True) for a in assets] for fmt, assets in metadata.items()}
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_json_summary(devices_file, capsys):
    code = plan_sizes.main(["100vw", "--devices", str(devices_file), "--json"])
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["widths"] == [1600, 800, 400]
    assert payload["devices"] == 3
    assert [t["width"] for t in payload["targets"]] == [1600, 800, 400]


def test_source_size_and_scaling_factor(devices_file, capsys):
    code = plan_sizes.main(
        ["50vw", "--devices", str(devices_file), "--width", "700", "--height", "350", "--scaling-factor", "0", "--json"]
    )
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["widths"] == [700, 400, 200]


def test_metadata_produces_queries(devices_file, metadata_file, capsys):
    code = plan_sizes.main(
        [
            "100vw",
            "--devices",
            str(devices_file),
            "--metadata",
            str(metadata_file),
            "--orientation",
            "landscape",
            "--selector",
            ".hero",
            "--json",
        ]
    )
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["queries"] == 3
    assert "@media (max-width: 400px) { .hero { background-image: url('/img/output-400.jpeg'); } }" in payload["css"]
    assert payload["sources"][0]["srcset"] == "/img/output-1600.jpeg 2x, /img/output-800.jpeg 1x"


def test_text_output(devices_file, capsys):
    code = plan_sizes.main(["(min-width: 600px) 400px, 100vw", "--devices", str(devices_file)])
    out = capsys.readouterr().out
    assert code == 0
    assert "Sizes plan for '(min-width: 600px) 400px, 100vw'" in out
    assert "widths: [800, 400]" in out


@pytest.mark.parametrize("sizes", ["screen 400px", "(min-width: 600px)", "400em"])
def test_invalid_sizes_exit_nonzero(sizes, capsys):
    assert plan_sizes.main([sizes]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_invalid_devices_file(tmp_path: Path, capsys):
    path = tmp_path / "devices.json"
    path.write_text(json.dumps([{"w": -1, "h": 600}]), encoding="utf-8")
    assert plan_sizes.main(["100vw", "--devices", str(path)]) == 1
    assert plan_sizes.main(["100vw", "--devices", str(tmp_path / "missing.json")]) == 1
    assert "error:" in capsys.readouterr().err


def test_log_level_is_validated(capsys):
    with pytest.raises(SystemExit) as excinfo:
        plan_sizes.main(["100vw", "--log-level", "loud"])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
    assert plan_sizes.parse_args(["--log-level", "debug"]).log_level == "DEBUG"
