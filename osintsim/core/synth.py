# file: osintsim/core/synth.py
"""
Fake result synthesis.

Nothing in this module looks anything up. A small integer seed derived from the
target (its length plus its numeric tail) picks entries out of fixed tables, and
the rest of the fields come from the random source:

- stable for a given target: carrier, location, line type, leak source label
- redrawn on every call: risk score's random term, leak count, linked accounts,
  tags

All functions are pure given an explicit `random.Random`.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass

from osintsim.core.model import NO_LEAK_SOURCE, LineType, SynthesizedResult

logger = logging.getLogger(__name__)

LEAK_SOURCES: tuple[str, ...] = (
    "Facebook_2019_Dump",
    "Shanghai_Police_DB_2022",
    "JD_Logistics_Leak",
    "Weibo_User_Table_V3",
    "Telegram_CN_Group_Export",
    "LinkedIn_Scrape_2023",
    "Hotel_CheckIn_Records_2024",
    "DarkWeb_Credit_Alpha",
    "Unknown_Botnet_Log",
)

TECH_TAGS: tuple[str, ...] = (
    "WhatsApp",
    "Telegram",
    "WeChat",
    "Alipay",
    "Twitter",
    "Signal",
    "Tinder",
)

CITY_CODES: dict[str, str] = {
    "130": "Beijing",
    "131": "Shanghai",
    "132": "Guangzhou",
    "133": "Shenzhen",
    "134": "Chengdu",
    "135": "Hangzhou",
    "136": "Wuhan",
    "137": "Xi'an",
    "138": "Nanjing",
    "139": "Chongqing",
    "150": "Tianjin",
    "151": "Suzhou",
    "186": "Beijing",
    "189": "Shanghai",
}

CMCC_PREFIXES = frozenset(
    {
        "134", "135", "136", "137", "138", "139",
        "150", "151", "152", "157", "158", "159",
        "182", "183", "184", "187", "188",
    }
)
CUCC_PREFIXES = frozenset({"130", "131", "132", "155", "156", "185", "186"})
CTCC_PREFIXES = frozenset({"133", "153", "180", "181", "189"})

CARRIER_CMCC = "China Mobile (CMCC)"
CARRIER_CUCC = "China Unicom (CUCC)"
CARRIER_CTCC = "China Telecom (CTCC)"
CARRIER_MVNO = "Virtual Operator / MVNO"
CARRIER_US = "Verizon / AT&T"
CARRIER_UK = "Vodafone UK"
CARRIER_UNKNOWN = "Unknown Carrier"

LOCATION_CN_FALLBACK = "CN - Random Province"
LOCATION_US = "USA / North America"
LOCATION_UK = "United Kingdom"
LOCATION_UNKNOWN = "Overseas / Unknown"

# Weighted: three in five targets come out as plain mobile lines.
LINE_TYPE_TABLE: tuple[LineType, ...] = ("Mobile", "Mobile", "Mobile", "VoIP", "IoT")

MAX_TAGS = 4

OPERATOR_LOG_LINES: tuple[str, ...] = (
    "Initializing handshake protocol...",
    "Bypassing carrier firewall...",
    "Triangulating signal towers...",
    "Accessing SS7 backbone...",
    "Querying dark web mirrors...",
    "Decrypting HLR lookup response...",
    "Cross-referencing social graphs...",
    "Found 3 matches in leaked databases...",
    "Analyzing digital footprint...",
    "Report generation initiated...",
)

_DOMESTIC_COUNTRY_CODES = ("+86", "86")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_RNG = random.Random()


@dataclass(frozen=True, slots=True)
class CarrierInfo:
    """Carrier/location resolution for a target; `prefix` is empty for non-domestic targets."""

    carrier: str
    location: str
    prefix: str = ""


def leading_int(text: str) -> int:
    """
    Parse an optional sign and leading decimal digits; 0 if nothing parses.

    Leading whitespace is skipped and anything after the digits is ignored, so
    "12ab" parses as 12 and "ab12" as 0.
    """

    m = _LEADING_INT.match(text)
    if m is None:
        return 0
    return int(m.group(1))


def compute_seed(target: str) -> int:
    """Seed = target length + the integer parsed from its last four characters."""

    return len(target) + leading_int(target[-4:])


def is_domestic_format(target: str) -> bool:
    return "86" in target or len(target) == 11


def prefix_code(target: str) -> str:
    """Strip a leading +86/86 country code and return the next three characters."""

    national = target
    for cc in _DOMESTIC_COUNTRY_CODES:
        if national.startswith(cc):
            national = national[len(cc) :]
            break
    return national[:3]


def resolve_carrier(target: str) -> CarrierInfo:
    """Classify a target into one of the fixed carrier/location labels."""

    if is_domestic_format(target):
        prefix = prefix_code(target)
        if prefix in CMCC_PREFIXES:
            carrier = CARRIER_CMCC
        elif prefix in CUCC_PREFIXES:
            carrier = CARRIER_CUCC
        elif prefix in CTCC_PREFIXES:
            carrier = CARRIER_CTCC
        else:
            carrier = CARRIER_MVNO
        city = CITY_CODES.get(prefix)
        location = f"CN - {city}" if city else LOCATION_CN_FALLBACK
        return CarrierInfo(carrier=carrier, location=location, prefix=prefix)

    if target.startswith("+1"):
        return CarrierInfo(carrier=CARRIER_US, location=LOCATION_US)
    if target.startswith("+44"):
        return CarrierInfo(carrier=CARRIER_UK, location=LOCATION_UK)
    return CarrierInfo(carrier=CARRIER_UNKNOWN, location=LOCATION_UNKNOWN)


def pick_tags(rng: random.Random) -> tuple[str, ...]:
    """Shuffle a copy of the tag vocabulary and keep the first 0..MAX_TAGS entries."""

    pool = list(TECH_TAGS)
    rng.shuffle(pool)
    count = int(rng.random() * (MAX_TAGS + 1))
    return tuple(pool[:count])


def synthesize(target: str, *, rng: random.Random | None = None) -> SynthesizedResult:
    """
    Build a fake result for `target`.

    Args:
        target: Non-empty scan target. Length checks are the caller's job
            (see `osintsim.core.target.validate_target`).
        rng: Random source. Defaults to a shared module-level generator; pass a
            seeded `random.Random` for reproducible output.
    """

    r = rng if rng is not None else _RNG

    seed = compute_seed(target)
    info = resolve_carrier(target)

    risk_score = min(99, int(r.random() * 60) + seed % 40)
    leak_count = int(r.random() * 15)
    last_leak_source = LEAK_SOURCES[seed % len(LEAK_SOURCES)] if leak_count > 0 else NO_LEAK_SOURCE
    linked_accounts = int(r.random() * 20)
    line_type = LINE_TYPE_TABLE[seed % len(LINE_TYPE_TABLE)]
    tags = pick_tags(r)

    logger.debug(
        "Synthesized result",
        extra={"target": target, "seed": seed, "carrier": info.carrier, "risk_score": risk_score},
    )

    return SynthesizedResult(
        target=target,
        carrier=info.carrier,
        location=info.location,
        line_type=line_type,
        risk_score=risk_score,
        is_voip=line_type == "VoIP",
        leak_count=leak_count,
        last_leak_source=last_leak_source,
        linked_accounts=linked_accounts,
        tags=tags,
    )


def random_log_line(rng: random.Random | None = None) -> str:
    """Return one operator log line for the scan progress display."""

    r = rng if rng is not None else _RNG
    return OPERATOR_LOG_LINES[int(r.random() * len(OPERATOR_LOG_LINES))]
