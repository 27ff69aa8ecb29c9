from __future__ import annotations

import csv
import json
from pathlib import Path

import pyperclip
import pytest
from PIL import Image

from osintsim.core.model import SynthesizedResult
from osintsim.io.report import (
    SIMULATION_DISCLAIMER,
    ClipboardUnavailableError,
    build_report,
    copy_summary,
    export_csv,
    export_json,
    export_png,
    export_text,
    report_filename,
    result_from_report,
    summary_text,
)


def _result() -> SynthesizedResult:
    return SynthesizedResult(
        target="8613812345678",
        carrier="China Mobile (CMCC)",
        location="CN - Nanjing",
        line_type="Mobile",
        risk_score=72,
        is_voip=False,
        leak_count=4,
        last_leak_source="Weibo_User_Table_V3",
        linked_accounts=11,
        tags=("WeChat", "Taobao"),
    )


def test_summary_text_has_six_fields() -> None:
    assert summary_text(_result()) == (
        "[OSINT REPORT // 8613812345678]\n"
        "Carrier: China Mobile (CMCC)\n"
        "Location: CN - Nanjing\n"
        "Risk Score: 72/100\n"
        "Leaks Found: 4\n"
        "Linked Accounts: 11"
    )


def test_build_report_shape_and_result_recovery() -> None:
    result = _result()
    report = build_report(result)

    assert report["metadata"]["simulation"] is True
    assert report["risk_level"] == "high"
    assert report["summary"]["disclaimer"] == SIMULATION_DISCLAIMER
    assert result_from_report(json.loads(json.dumps(report))) == result


def test_result_from_report_requires_result_object() -> None:
    with pytest.raises(ValueError):
        result_from_report({"metadata": {}})


def test_export_json_and_text(tmp_path: Path) -> None:
    report = build_report(_result())
    json_path = tmp_path / "r.json"
    txt_path = tmp_path / "r.txt"

    export_json(report, json_path)
    export_text(report, txt_path)

    assert json.loads(json_path.read_text(encoding="utf-8"))["result"]["carrier"] == (
        "China Mobile (CMCC)"
    )
    assert txt_path.read_text(encoding="utf-8") == summary_text(_result()) + "\n"


def test_export_csv_writes_one_row_per_tag(tmp_path: Path) -> None:
    out = tmp_path / "r.csv"
    export_csv(build_report(_result()), out)

    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert [r["value"] for r in rows if r["section"] == "tags"] == ["WeChat", "Taobao"]
    by_key = {r["key"]: r["value"] for r in rows if r["section"] == "result"}
    assert by_key["risk_score"] == "72"
    assert by_key["risk_level"] == "high"
    assert [r["row_index"] for r in rows] == [str(i) for i in range(1, len(rows) + 1)]


def test_export_png_scales_width(tmp_path: Path) -> None:
    out = tmp_path / "card.png"
    export_png(_result(), out, scale=2)
    with Image.open(out) as img:
        assert img.width == 1280
        assert img.height > 0


def test_report_filename_replaces_unsafe_characters() -> None:
    assert report_filename("+86 138/1") == "OSINT_REPORT_+86_138_1.png"
    assert report_filename("12345", suffix=".json") == "OSINT_REPORT_12345.json"


def test_copy_summary_uses_clipboard(monkeypatch: pytest.MonkeyPatch) -> None:
    copied: list[str] = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)

    text = copy_summary(_result())

    assert copied == [text]
    assert text.startswith("[OSINT REPORT // 8613812345678]")


def test_copy_summary_reports_missing_clipboard(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(text: str) -> None:
        raise pyperclip.PyperclipException("no backend")

    monkeypatch.setattr(pyperclip, "copy", _fail)
    with pytest.raises(ClipboardUnavailableError):
        copy_summary(_result())
