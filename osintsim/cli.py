# file: osintsim/cli.py
"""
osintsim CLI.

Commands:
  - scan: run a simulated scan against a target and print the result card
  - report: convert a saved JSON report into txt/CSV/PDF/PNG
  - rain: render the background animation headlessly into a PNG
  - serve-gui: launch the (optional) PySide6 GUI
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import click

from osintsim import __version__
from osintsim.animation.rain import RainAnimator, RainConfig
from osintsim.animation.scheduler import AsyncioFrameScheduler
from osintsim.animation.surface import ImageSurface
from osintsim.config import OsintsimSettings, load_settings
from osintsim.core.scan import LogEntry, ScanSession, run_scan
from osintsim.core.target import EmptyTargetError, TargetTooShortError
from osintsim.io.report import (
    SIMULATION_DISCLAIMER,
    ClipboardUnavailableError,
    build_report,
    card_lines,
    copy_summary,
    export_csv,
    export_json,
    export_png,
    export_text,
    generate_pdf,
    result_from_report,
)
from osintsim.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _configure_cli_logging(settings: OsintsimSettings) -> None:
    # stdout carries command output (JSON, report text); logs go to stderr.
    configure_logging(
        level=settings.log_level, json_logging=settings.json_logging, stream=sys.stderr
    )


def _log_printer() -> Callable[[ScanSession], None]:
    printed: list[LogEntry] = []

    def _on_update(session: ScanSession) -> None:
        for entry in session.logs:
            if any(entry is p for p in printed):
                continue
            printed.append(entry)
            click.echo(f"[{entry.time_label()}] > {entry.text}", err=True)

    return _on_update


async def scan_async(
    target: str,
    *,
    settings: OsintsimSettings,
    rng: random.Random,
    fast: bool,
    verbose: bool,
) -> dict[str, Any]:
    config = settings.scan_config()
    if fast:
        config = replace(config, tick_seconds=0.0, completion_delay_seconds=0.0)
    session = ScanSession(config=config, rng=rng)

    on_update = _log_printer() if verbose else None
    result = await run_scan(session, target, on_update=on_update)
    return build_report(result)


async def render_rain(
    surface: ImageSurface,
    config: RainConfig,
    *,
    rng: random.Random,
    frames: int,
    inactive_frames: int = 0,
) -> int:
    """
    Run the animator in real time for `frames` active frames followed by
    `inactive_frames` fading ones, then stop it. Returns the frames rendered.
    """

    total = frames + inactive_frames
    if total == 0:
        return 0

    done = asyncio.Event()
    rendered = 0

    def _after_frame() -> None:
        nonlocal rendered
        rendered += 1
        if rendered == frames:
            animator.active = False
        if rendered >= total:
            animator.stop()
            done.set()

    animator = RainAnimator(
        surface,
        AsyncioFrameScheduler(fps=config.fps, after_frame=_after_frame),
        config=config,
        rng=rng,
        active=frames > 0,
    )
    animator.start()
    # start() renders the first frame itself, outside the scheduler.
    _after_frame()
    await done.wait()
    logger.debug("Rain rendered", extra={"frames": rendered, "columns": animator.state.columns})
    return rendered


def _human_text(report: dict[str, Any]) -> str:
    result = result_from_report(report)
    lines = ["osintsim (SIMULATION MODE ONLY)", SIMULATION_DISCLAIMER, ""]
    lines.extend(card_lines(result))
    return "\n".join(lines) + "\n"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def main() -> None:
    """Simulated phone number investigation (no real data is accessed)."""


@main.command("scan")
@click.argument("target", type=str)
@click.option(
    "--json", "as_json", is_flag=True, help="Print the JSON report to stdout (or --output)."
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Write primary output to a file.",
)
@click.option(
    "--report",
    "report_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the full JSON report to a file.",
)
@click.option(
    "--png",
    "png_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Export the result card as a PNG image.",
)
@click.option(
    "--copy", "copy_to_clipboard", is_flag=True, help="Copy the text summary to the clipboard."
)
@click.option(
    "--seed", type=int, default=None, help="Seed the random source for reproducible output."
)
@click.option("--fast", is_flag=True, help="Skip the progress pacing delays.")
@click.option("--quiet", "-q", is_flag=True, help="Do not print operator log lines.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
def scan_cmd(
    target: str,
    as_json: bool,
    output_path: Path | None,
    report_path: Path | None,
    png_path: Path | None,
    copy_to_clipboard: bool,
    seed: int | None,
    fast: bool,
    quiet: bool,
    config_path: Path | None,
) -> None:
    """
    Run a simulated scan against TARGET (at least 5 characters).
    """

    settings = load_settings(yaml_path=config_path)
    _configure_cli_logging(settings)

    rng = random.Random(seed)
    try:
        report = asyncio.run(
            scan_async(target, settings=settings, rng=rng, fast=fast, verbose=not quiet)
        )
    except (EmptyTargetError, TargetTooShortError) as exc:
        raise click.ClickException(str(exc)) from exc

    if report_path is not None:
        export_json(report, report_path)

    result = result_from_report(report)
    if png_path is not None:
        export_png(result, png_path, scale=settings.export_scale)

    if copy_to_clipboard:
        try:
            copy_summary(result)
        except ClipboardUnavailableError as exc:
            click.echo(f"Warning: {exc}", err=True)
        else:
            click.echo("Summary copied to clipboard.", err=True)

    if as_json:
        payload = json.dumps(report, indent=2, sort_keys=True)
        if output_path is not None:
            output_path.write_text(payload, encoding="utf-8")
        else:
            click.echo(payload)
    else:
        text = _human_text(report)
        if output_path is not None:
            output_path.write_text(text, encoding="utf-8")
        click.echo(text, nl=False)


@main.command("report")
@click.argument("input_report", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "csv", "pdf", "png", "txt"], case_sensitive=False),
    default="csv",
)
@click.option("--output", "output_path", type=click.Path(path_type=Path), default=None)
@click.option("--scale", type=click.IntRange(1, 8), default=2, show_default=True, help="PNG scale.")
def report_cmd(input_report: Path, fmt: str, output_path: Path | None, scale: int) -> None:
    """
    Convert a saved JSON report into another format.
    """

    try:
        report = json.loads(input_report.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid report: {exc}") from exc
    if not isinstance(report, dict):
        raise click.ClickException("Input report must be a JSON object.")

    fmt = fmt.lower()
    if output_path is None:
        output_path = input_report.with_suffix(f".{fmt}")

    try:
        if fmt == "json":
            export_json(report, output_path)
        elif fmt == "csv":
            export_csv(report, output_path)
        elif fmt == "txt":
            export_text(report, output_path)
        elif fmt == "png":
            export_png(result_from_report(report), output_path, scale=scale)
        elif fmt == "pdf":
            generate_pdf(report, output_path)
        else:
            raise click.ClickException(f"Unsupported format: {fmt}")
    except ValueError as exc:
        raise click.ClickException(f"Invalid report: {exc}") from exc
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(str(output_path))


@main.command("rain")
@click.option("--width", type=click.IntRange(1, 8192), default=640, show_default=True)
@click.option("--height", type=click.IntRange(1, 8192), default=360, show_default=True)
@click.option("--frames", type=click.IntRange(0), default=120, show_default=True)
@click.option(
    "--inactive-frames",
    type=click.IntRange(0),
    default=0,
    show_default=True,
    help="Frames rendered with the animation switched off afterwards (fade out).",
)
@click.option("--seed", type=int, default=None)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
def rain_cmd(
    width: int,
    height: int,
    frames: int,
    inactive_frames: int,
    seed: int | None,
    output_path: Path,
    config_path: Path | None,
) -> None:
    """Render the falling-glyph background into a PNG snapshot."""

    settings = load_settings(yaml_path=config_path)
    _configure_cli_logging(settings)

    rain_config = settings.rain_config()
    surface = ImageSurface(width, height, font_size=rain_config.cell_size)
    asyncio.run(
        render_rain(
            surface,
            rain_config,
            rng=random.Random(seed),
            frames=frames,
            inactive_frames=inactive_frames,
        )
    )

    surface.save(output_path)
    click.echo(str(output_path))


@main.command("serve-gui")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
def serve_gui_cmd(config_path: Path | None) -> None:
    """Launch the (optional) PySide6 GUI."""

    settings = load_settings(yaml_path=config_path)
    _configure_cli_logging(settings)

    try:
        from osintsim.gui import run_gui
    except Exception as exc:
        raise click.ClickException(
            "GUI dependencies not installed. Install with `pip install 'osintsim[gui]'`."
        ) from exc

    run_gui(settings)
