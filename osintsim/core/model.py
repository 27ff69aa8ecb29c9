# file: osintsim/core/model.py
"""
Result record produced by the synthesizer.

A `SynthesizedResult` has no lifecycle beyond construction: a new scan replaces
it wholesale and a reset discards it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

LineType = Literal["Mobile", "VoIP", "Satellite", "IoT"]
LINE_TYPES: tuple[LineType, ...] = ("Mobile", "VoIP", "Satellite", "IoT")

RiskLevel = Literal["low", "medium", "high"]

# Badge colors used by the result card (GUI and PNG export).
RISK_COLORS: dict[RiskLevel, str] = {
    "low": "#22c55e",
    "medium": "#eab308",
    "high": "#dc2626",
}

NO_LEAK_SOURCE = "None"


def risk_level(score: int) -> RiskLevel:
    """Band a 0..99 risk score the way the result card colors it."""

    if score < 30:
        return "low"
    if score < 70:
        return "medium"
    return "high"


@dataclass(frozen=True, slots=True)
class SynthesizedResult:
    """
    Fake findings for a single scan target.

    Fields:
        target: The input string exactly as scanned.
        carrier: Carrier label (fixed vocabulary, see `osintsim.core.synth`).
        location: Location label.
        line_type: One of `LINE_TYPES`.
        risk_score: Integer in 0..99.
        is_voip: True iff `line_type == "VoIP"`.
        leak_count: Integer >= 0.
        last_leak_source: One of the fixed leak sources, or "None".
        linked_accounts: Integer >= 0.
        tags: 0-4 distinct footprint tags; order carries no meaning.
    """

    target: str
    carrier: str
    location: str
    line_type: LineType
    risk_score: int
    is_voip: bool
    leak_count: int
    last_leak_source: str
    linked_accounts: int
    tags: tuple[str, ...] = ()

    @property
    def risk_level(self) -> RiskLevel:
        return risk_level(self.risk_score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "carrier": self.carrier,
            "location": self.location,
            "line_type": self.line_type,
            "risk_score": self.risk_score,
            "is_voip": self.is_voip,
            "leak_count": self.leak_count,
            "last_leak_source": self.last_leak_source,
            "linked_accounts": self.linked_accounts,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SynthesizedResult":
        """Rebuild a result from `to_dict()` output (e.g. a saved JSON report)."""

        line_type = str(data.get("line_type") or "Mobile")
        if line_type not in LINE_TYPES:
            raise ValueError(f"Unknown line type: {line_type}")
        tags = data.get("tags") or []
        if not isinstance(tags, (list, tuple)):
            raise ValueError("tags must be a list")
        return cls(
            target=str(data.get("target") or ""),
            carrier=str(data.get("carrier") or ""),
            location=str(data.get("location") or ""),
            line_type=line_type,  # type: ignore[arg-type]
            risk_score=int(data.get("risk_score") or 0),
            is_voip=line_type == "VoIP",
            leak_count=int(data.get("leak_count") or 0),
            last_leak_source=str(data.get("last_leak_source") or NO_LEAK_SOURCE),
            linked_accounts=int(data.get("linked_accounts") or 0),
            tags=tuple(str(t) for t in tags),
        )
