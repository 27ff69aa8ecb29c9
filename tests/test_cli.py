from __future__ import annotations

import json
import logging
import random
from collections.abc import Iterator
from pathlib import Path

import pyperclip
import pytest
from click.testing import CliRunner
from PIL import Image

from osintsim.animation.rain import RainConfig
from osintsim.animation.surface import ImageSurface
from osintsim.cli import main, render_rain


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Keep a developer's .env / OSINTSIM_* settings out of CLI runs.
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OSINTSIM_CONFIG", raising=False)
    monkeypatch.delenv("OSINTSIM_JSON_LOGGING", raising=False)
    monkeypatch.setenv("OSINTSIM_LOG_LEVEL", "WARNING")

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    # configure_logging points the root handler at the runner's stderr.
    root.handlers[:] = handlers
    root.setLevel(level)


def _scan_json(*args: str) -> dict:
    runner = CliRunner()
    res = runner.invoke(main, ["scan", *args, "--json", "--fast", "--quiet"])
    assert res.exit_code == 0, res.output
    return json.loads(res.output)


def test_scan_json_output() -> None:
    report = _scan_json("8613812345678", "--seed", "1")
    assert report["result"]["carrier"] == "China Mobile (CMCC)"
    assert report["result"]["location"] == "CN - Nanjing"
    assert report["metadata"]["simulation"] is True


def test_scan_seed_is_reproducible() -> None:
    a = _scan_json("+12025551234", "--seed", "42")
    b = _scan_json("+12025551234", "--seed", "42")
    assert a["result"] == b["result"]


def test_scan_rejects_short_target() -> None:
    runner = CliRunner()
    res = runner.invoke(main, ["scan", "1234", "--fast", "--quiet"])
    assert res.exit_code == 1
    assert "at least 5" in res.output


def test_scan_writes_report_and_png(tmp_path: Path) -> None:
    runner = CliRunner()
    report_path = tmp_path / "r.json"
    png_path = tmp_path / "r.png"
    res = runner.invoke(
        main,
        [
            "scan",
            "13800138000",
            "--fast",
            "--quiet",
            "--report",
            str(report_path),
            "--png",
            str(png_path),
        ],
    )
    assert res.exit_code == 0, res.output
    assert "TARGET_ANALYSIS_REPORT" in res.output
    assert json.loads(report_path.read_text(encoding="utf-8"))["result"]["target"] == "13800138000"
    with Image.open(png_path) as img:
        assert img.width == 1280


def test_report_converts_saved_json_to_text(tmp_path: Path) -> None:
    runner = CliRunner()
    report_path = tmp_path / "r.json"
    res = runner.invoke(
        main, ["scan", "12345", "--fast", "--quiet", "--report", str(report_path)]
    )
    assert res.exit_code == 0, res.output

    out = tmp_path / "r.txt"
    res = runner.invoke(main, ["report", str(report_path), "--format", "txt", "--output", str(out)])
    assert res.exit_code == 0, res.output
    assert out.read_text(encoding="utf-8").startswith("[OSINT REPORT // 12345]")


def test_report_rejects_invalid_report(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"metadata": {}}), encoding="utf-8")
    res = CliRunner().invoke(main, ["report", str(bad), "--format", "txt"])
    assert res.exit_code == 1
    assert "Invalid report" in res.output


def test_rain_renders_png_of_requested_size(tmp_path: Path) -> None:
    out = tmp_path / "rain.png"
    res = CliRunner().invoke(
        main,
        ["rain", "--width", "70", "--height", "42", "--frames", "5", "--seed", "3",
         "--output", str(out)],
    )
    assert res.exit_code == 0, res.output
    with Image.open(out) as img:
        assert img.size == (70, 42)


def test_scan_json_stdout_stays_parseable_with_logs_and_clipboard_failure(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _no_clipboard(text: str) -> None:
        raise pyperclip.PyperclipException("no clipboard backend")

    monkeypatch.setattr(pyperclip, "copy", _no_clipboard)
    monkeypatch.setenv("OSINTSIM_LOG_LEVEL", "DEBUG")

    res = CliRunner().invoke(
        main, ["scan", "8613812345678", "--json", "--fast", "--quiet", "--copy"]
    )

    assert res.exit_code == 0, res.output
    assert json.loads(res.stdout)["result"]["target"] == "8613812345678"
    assert "Clipboard unavailable" in res.stderr
    assert "Synthesized result" in res.stderr


def test_report_rejects_malformed_json(tmp_path: Path) -> None:
    bad = tmp_path / "broken.json"
    bad.write_text("{not json", encoding="utf-8")
    res = CliRunner().invoke(main, ["report", str(bad), "--format", "txt"])
    assert res.exit_code == 1
    assert "Invalid report" in res.output


async def test_render_rain_runs_active_then_fading_frames() -> None:
    surface = ImageSurface(70, 42)
    rendered = await render_rain(
        surface, RainConfig(fps=500), rng=random.Random(2), frames=3, inactive_frames=4
    )
    assert rendered == 7


async def test_render_rain_with_no_frames_leaves_surface_black() -> None:
    surface = ImageSurface(70, 42)
    assert await render_rain(surface, RainConfig(), rng=random.Random(2), frames=0) == 0
    assert surface.image.getbbox() is None
