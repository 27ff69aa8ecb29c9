from __future__ import annotations

import asyncio
import random
import re

import pytest

from osintsim.core.scan import (
    COMPLETE_LOG_LINE,
    ScanConfig,
    ScanInProgressError,
    ScanSession,
    drive_scan,
    run_scan,
)
from osintsim.core.target import EmptyTargetError, TargetTooShortError

_FAST = ScanConfig(tick_seconds=0.0, completion_delay_seconds=0.0)


def _session(config: ScanConfig = _FAST, seed: int = 1) -> ScanSession:
    return ScanSession(config=config, rng=random.Random(seed), clock=lambda: 1_700_000_000_000)


def test_begin_validates_target() -> None:
    session = _session()
    with pytest.raises(TargetTooShortError):
        session.begin("1234")
    with pytest.raises(EmptyTargetError):
        session.begin("  ")
    assert session.status == "idle"


def test_ticks_reach_100_and_keep_log_history_bounded() -> None:
    cfg = ScanConfig(log_probability=1.0, log_history=6)
    session = _session(cfg)
    session.begin("13800138000")
    assert session.status == "scanning"

    done = False
    for _ in range(10_000):
        done = session.tick()
        assert len(session.logs) <= cfg.log_history + 1
        if done:
            break
    assert done
    assert session.progress == 100.0


def test_complete_synthesizes_and_appends_success_line() -> None:
    session = _session()
    session.begin(" 8613812345678 ")
    while not session.tick():
        pass
    result = session.complete()

    assert session.status == "complete"
    assert session.result is result
    assert result.target == "8613812345678"
    assert session.logs[-1].text == COMPLETE_LOG_LINE
    assert session.logs[-1].kind == "success"
    assert re.fullmatch(r"\d\d:\d\d:\d\d", session.logs[-1].time_label())


def test_begin_while_scanning_raises_and_reset_returns_to_idle() -> None:
    session = _session()
    session.begin("12345")
    with pytest.raises(ScanInProgressError):
        session.begin("67890")

    session.reset()
    assert session.status == "idle"
    assert session.target == ""
    assert session.progress == 0.0
    assert session.logs == []
    assert session.result is None


async def test_run_scan_drives_session_to_complete() -> None:
    session = _session()
    updates: list[float] = []

    result = await run_scan(
        session, "+442079460000", on_update=lambda s: updates.append(s.progress)
    )

    assert session.status == "complete"
    assert result.carrier == "Vodafone UK"
    assert updates
    assert updates == sorted(updates)
    assert updates[-1] == 100.0


async def test_run_scan_cancellation_resets_session() -> None:
    session = _session(ScanConfig(tick_seconds=10.0))
    task = asyncio.create_task(run_scan(session, "12345"))
    await asyncio.sleep(0)
    assert session.status == "scanning"

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert session.status == "idle"


async def test_drive_scan_paces_a_session_begun_by_the_caller() -> None:
    session = _session()
    session.begin("13800138000")
    statuses: list[str] = []

    result = await drive_scan(session, on_update=lambda s: statuses.append(s.status))

    assert statuses[0] == "scanning"
    assert statuses[-1] == "complete"
    assert session.result is result


async def test_drive_scan_requires_a_begun_session() -> None:
    with pytest.raises(RuntimeError):
        await drive_scan(_session())
