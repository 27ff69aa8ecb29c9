from __future__ import annotations

import pytest

from osintsim.core.model import RISK_COLORS, SynthesizedResult, risk_level


def _result(**overrides: object) -> SynthesizedResult:
    fields: dict[str, object] = {
        "target": "8613812345678",
        "carrier": "China Mobile (CMCC)",
        "location": "CN - Nanjing",
        "line_type": "VoIP",
        "risk_score": 42,
        "is_voip": True,
        "leak_count": 3,
        "last_leak_source": "JD_Logistics_Leak",
        "linked_accounts": 7,
        "tags": ("WeChat", "Alipay"),
    }
    fields.update(overrides)
    return SynthesizedResult(**fields)  # type: ignore[arg-type]


def test_risk_level_bands() -> None:
    assert risk_level(0) == "low"
    assert risk_level(29) == "low"
    assert risk_level(30) == "medium"
    assert risk_level(69) == "medium"
    assert risk_level(70) == "high"
    assert risk_level(99) == "high"
    assert set(RISK_COLORS) == {"low", "medium", "high"}


def test_result_is_immutable() -> None:
    res = _result()
    with pytest.raises(AttributeError):
        res.risk_score = 1  # type: ignore[misc]


def test_from_dict_rebuilds_result_and_derives_voip_flag() -> None:
    res = _result()
    data = res.to_dict()
    assert data["tags"] == ["WeChat", "Alipay"]

    data["is_voip"] = False  # ignored; derived from line_type
    rebuilt = SynthesizedResult.from_dict(data)
    assert rebuilt == res
    assert rebuilt.risk_level == "medium"


def test_from_dict_rejects_unknown_line_type() -> None:
    data = _result().to_dict()
    data["line_type"] = "Landline"
    with pytest.raises(ValueError):
        SynthesizedResult.from_dict(data)
