# file: osintsim/io/report.py
"""
Report generation and export helpers.

Reports are plain dictionaries (JSON-serializable) wrapping a
`SynthesizedResult`, so the CLI and GUI export the same shapes.

Formats:
- plain-text summary (clipboard template)
- JSON, CSV
- PNG (Pillow raster of the result card)
- PDF (optional, requires `reportlab`)
"""

from __future__ import annotations

import csv
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

import pyperclip
from PIL import Image, ImageDraw, ImageFont

from osintsim import __version__
from osintsim.core.model import RISK_COLORS, SynthesizedResult, risk_level

SIMULATION_DISCLAIMER = (
    "WARNING: This tool is a graphical simulation for entertainment purposes only. "
    "No real data is accessed, stored, or processed. Any resemblance to real person "
    "data is purely coincidental. Do not use for illegal activities."
)

# Object name of the rendered report; image capture looks the widget up by it.
REPORT_TARGET_ID = "osint-report"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9+_.-]")


class ClipboardUnavailableError(RuntimeError):
    """Raised when no clipboard backend is available on this system."""


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def summary_text(result: SynthesizedResult) -> str:
    """Six-field plain-text summary used for clipboard copy."""

    return "\n".join(
        [
            f"[OSINT REPORT // {result.target}]",
            f"Carrier: {result.carrier}",
            f"Location: {result.location}",
            f"Risk Score: {result.risk_score}/100",
            f"Leaks Found: {result.leak_count}",
            f"Linked Accounts: {result.linked_accounts}",
        ]
    )


def copy_summary(result: SynthesizedResult) -> str:
    """Copy `summary_text(result)` to the system clipboard and return it."""

    text = summary_text(result)
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardUnavailableError(f"Clipboard unavailable: {exc}") from exc
    return text


def card_lines(result: SynthesizedResult) -> list[str]:
    """Human-readable result card, one line per entry."""

    voip = "  [VOIP DETECTED]" if result.is_voip else ""
    tags = ", ".join(t.upper() for t in result.tags) or "-"
    return [
        "TARGET_ANALYSIS_REPORT",
        "CONFIDENTIAL // EYES ONLY",
        "",
        f"Target: {result.target}",
        f"Risk: {result.risk_score}/100 ({result.risk_level})",
        "",
        f"Carrier: {result.carrier}",
        f"Location: {result.location}",
        f"Line type: {result.line_type}{voip}",
        "",
        f"Data leaks found: {result.leak_count} RECORDS",
        f"Latest breach: {result.last_leak_source}",
        f"Associated accounts: ~{result.linked_accounts} Platforms",
        "",
        f"Detected footprints: {tags}",
    ]


def build_report(result: SynthesizedResult) -> dict[str, Any]:
    return {
        "metadata": {
            "tool": "osintsim",
            "version": __version__,
            "generated_at": utc_now_iso(),
            "simulation": True,
        },
        "result": result.to_dict(),
        "risk_level": risk_level(result.risk_score),
        "summary": {
            "text": summary_text(result),
            "disclaimer": SIMULATION_DISCLAIMER,
        },
    }


def result_from_report(report: Mapping[str, Any]) -> SynthesizedResult:
    """Rebuild the result stored in a report produced by `build_report`."""

    data = report.get("result")
    if not isinstance(data, dict):
        raise ValueError("Report has no 'result' object.")
    return SynthesizedResult.from_dict(data)


def report_filename(target: str, *, suffix: str = ".png") -> str:
    safe = _UNSAFE_FILENAME_CHARS.sub("_", target) or "target"
    return f"OSINT_REPORT_{safe}{suffix}"


def export_json(report: Mapping[str, Any], path: Path) -> None:
    """Write a report to disk as pretty-printed JSON."""

    path.write_text(json.dumps(report, indent=2, sort_keys=True), encoding="utf-8")


def export_text(report: Mapping[str, Any], path: Path) -> None:
    path.write_text(summary_text(result_from_report(report)) + "\n", encoding="utf-8")


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return json.dumps(value, ensure_ascii=True)


def _iter_kv_rows(section: str, data: Mapping[str, Any] | None) -> Iterable[dict[str, str]]:
    if not isinstance(data, dict):
        return []
    return [
        {"section": section, "key": _safe_str(key), "value": _safe_str(data.get(key))}
        for key in sorted(data.keys())
    ]


def export_csv(report: Mapping[str, Any], path: Path) -> None:
    """
    Export a report as key/value CSV rows.

    Tags are written one row each so spreadsheet filters work on them.
    """

    fieldnames = ["row_index", "section", "key", "value"]

    result = dict(report.get("result") or {})
    tags = result.pop("tags", []) or []

    rows: list[dict[str, str]] = []
    rows.extend(_iter_kv_rows("metadata", report.get("metadata")))
    rows.extend(_iter_kv_rows("result", result))
    rows.append(
        {"section": "result", "key": "risk_level", "value": _safe_str(report.get("risk_level"))}
    )
    for tag in tags:
        rows.append({"section": "tags", "key": "tag", "value": _safe_str(tag)})
    summary = report.get("summary")
    if isinstance(summary, dict):
        rows.append(
            {
                "section": "summary",
                "key": "disclaimer",
                "value": _safe_str(summary.get("disclaimer") or SIMULATION_DISCLAIMER),
            }
        )

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for idx, row in enumerate(rows, start=1):
            writer.writerow({"row_index": str(idx), **row})


_CARD_BG = (0, 0, 0)
_CARD_BORDER = (34, 197, 94)
_CARD_TEXT = (74, 222, 128)
_CARD_MUTED = (107, 114, 128)
_CARD_WHITE = (255, 255, 255)


def render_report_image(result: SynthesizedResult, *, scale: int = 2) -> Image.Image:
    """
    Rasterize the result card.

    Args:
        result: The result to draw.
        scale: Pixel density multiplier (2 matches a HiDPI capture).
    """

    if scale < 1:
        raise ValueError("scale must be >= 1")

    base_font = 14
    pad = 24 * scale
    line_h = 22 * scale
    width = 640 * scale
    lines = card_lines(result)
    height = pad * 2 + line_h * (len(lines) + 3)

    img = Image.new("RGB", (width, height), _CARD_BG)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default(size=base_font * scale)
    title_font = ImageFont.load_default(size=20 * scale)

    draw.rectangle((0, 0, width - 1, height - 1), outline=_CARD_BORDER, width=max(1, scale))

    badge = f"RISK: {result.risk_score}/100"
    badge_color = RISK_COLORS[result.risk_level]
    bx0 = width - pad - 160 * scale
    draw.rectangle(
        (bx0, pad, width - pad, pad + line_h + 8 * scale), outline=badge_color, width=2 * scale
    )
    draw.text((bx0 + 10 * scale, pad + 6 * scale), badge, fill=badge_color, font=font)

    y = pad
    for idx, line in enumerate(lines):
        if idx == 0:
            draw.text((pad, y), line, fill=_CARD_WHITE, font=title_font)
            y += line_h + 6 * scale
            continue
        color = _CARD_MUTED if idx == 1 else _CARD_TEXT
        draw.text((pad, y), line, fill=color, font=font)
        y += line_h

    y += line_h
    draw.text((pad, y), "SIMULATION MODE ONLY", fill=(234, 179, 8), font=font)
    return img


def export_png(result: SynthesizedResult, path: Path, *, scale: int = 2) -> None:
    render_report_image(result, scale=scale).save(path, format="PNG")


def generate_pdf(report: Mapping[str, Any], path: Path) -> None:
    """
    Generate a simple PDF report.

    Requires:
        `reportlab` (install with `pip install 'osintsim[pdf]'`)
    """

    try:
        from reportlab.lib.pagesizes import LETTER
        from reportlab.lib.units import inch
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfgen import canvas
    except Exception as exc:  # pragma: no cover (optional dependency)
        raise RuntimeError(
            "PDF generation requires `reportlab`. Install with `pip install 'osintsim[pdf]'`."
        ) from exc

    result = result_from_report(report)

    c = canvas.Canvas(str(path), pagesize=LETTER)
    width, height = LETTER
    x = 0.75 * inch
    y = height - 0.75 * inch
    max_width = width - (1.5 * inch)

    def _draw_lines(lines: list[str], *, font: str, size: int, leading: float) -> None:
        nonlocal y
        c.setFont(font, size)
        for txt in lines:
            if y < 0.75 * inch:
                c.showPage()
                y = height - 0.75 * inch
                c.setFont(font, size)
            c.drawString(x, y, txt)
            y -= leading

    def _wrap_text(text: str, *, font: str, size: int) -> list[str]:
        words = text.split()
        if not words:
            return [""]
        lines: list[str] = []
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if pdfmetrics.stringWidth(candidate, font, size) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines

    def heading(text: str) -> None:
        _draw_lines([text], font="Helvetica-Bold", size=12, leading=16)

    def paragraph(text: str) -> None:
        lines = _wrap_text(text, font="Helvetica", size=10)
        _draw_lines(lines, font="Helvetica", size=10, leading=13)

    heading("osintsim report")
    meta = report.get("metadata", {})
    if isinstance(meta, dict):
        paragraph(f"Generated at: {_safe_str(meta.get('generated_at'))}")
        paragraph(f"Version: {_safe_str(meta.get('version'))}")

    paragraph("")
    for idx, line in enumerate(card_lines(result)):
        if idx == 0:
            heading(line)
        else:
            paragraph(line)

    paragraph("")
    heading("Disclaimer")
    paragraph(SIMULATION_DISCLAIMER)

    c.save()
