# file: osintsim/core/scan.py
"""
Three-state scan flow: idle -> scanning -> complete (and reset back to idle).

`ScanSession` holds the UI-independent state (progress, operator log lines,
result). `run_scan` drives a session on the running asyncio loop so that the CLI
and the qasync-based GUI share one implementation. It is cancellable; a
cancelled scan leaves the session idle.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Literal

from osintsim.core.model import SynthesizedResult
from osintsim.core.synth import random_log_line, synthesize
from osintsim.core.target import DEFAULT_MIN_TARGET_LENGTH, validate_target

logger = logging.getLogger(__name__)

ScanStatus = Literal["idle", "scanning", "complete"]
LogKind = Literal["info", "warning", "success", "danger"]

COMPLETE_LOG_LINE = "SCAN COMPLETE. DATA RENDERED."


class ScanInProgressError(RuntimeError):
    """Raised when a scan is started while another one is still running."""


@dataclass(frozen=True, slots=True)
class LogEntry:
    id: int
    text: str
    kind: LogKind = "info"

    def time_label(self) -> str:
        """Local wall-clock time of the entry as HH:MM:SS."""

        return datetime.fromtimestamp(self.id / 1000).strftime("%H:%M:%S")

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "text": self.text, "kind": self.kind}


@dataclass(frozen=True, slots=True)
class ScanConfig:
    tick_seconds: float = 0.15
    completion_delay_seconds: float = 0.5
    max_step: float = 5.0
    log_probability: float = 0.3
    # Earlier entries kept when a new line is appended while scanning.
    log_history: int = 6
    min_target_length: int = DEFAULT_MIN_TARGET_LENGTH


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ScanSession:
    config: ScanConfig = field(default_factory=ScanConfig)
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], int] = _now_ms

    status: ScanStatus = "idle"
    target: str = ""
    progress: float = 0.0
    logs: list[LogEntry] = field(default_factory=list)
    result: SynthesizedResult | None = None

    def begin(self, raw_target: str) -> str:
        """
        Validate `raw_target` and enter the scanning state.

        Raises:
            ScanInProgressError: if a scan is already running.
            EmptyTargetError / TargetTooShortError: on invalid input.
        """

        if self.status == "scanning":
            raise ScanInProgressError("A scan is already running.")
        target = validate_target(raw_target, min_length=self.config.min_target_length)
        self.status = "scanning"
        self.target = target
        self.progress = 0.0
        self.logs = []
        self.result = None
        logger.debug("Scan started", extra={"target": target})
        return target

    def _new_log(self, text: str, kind: LogKind = "info") -> LogEntry:
        return LogEntry(id=self.clock(), text=text, kind=kind)

    def tick(self) -> bool:
        """Advance progress by one step; return True once progress reaches 100."""

        if self.status != "scanning":
            return False

        self.progress += self.rng.random() * self.config.max_step

        if self.rng.random() < self.config.log_probability:
            entry = self._new_log(random_log_line(self.rng))
            history = self.logs[-self.config.log_history :] if self.config.log_history > 0 else []
            self.logs = [*history, entry]

        if self.progress >= 100.0:
            self.progress = 100.0
            return True
        return False

    def complete(self) -> SynthesizedResult:
        """Synthesize the result for the current target and enter `complete`."""

        if self.status != "scanning":
            raise RuntimeError("complete() called without an active scan.")
        self.progress = 100.0
        self.result = synthesize(self.target, rng=self.rng)
        self.status = "complete"
        self.logs = [*self.logs, self._new_log(COMPLETE_LOG_LINE, "success")]
        logger.debug(
            "Scan complete",
            extra={"target": self.target, "risk_score": self.result.risk_score},
        )
        return self.result

    def reset(self) -> None:
        self.status = "idle"
        self.target = ""
        self.progress = 0.0
        self.logs = []
        self.result = None


async def run_scan(
    session: ScanSession,
    raw_target: str,
    *,
    on_update: Callable[[ScanSession], None] | None = None,
) -> SynthesizedResult:
    """
    Run a full scan on `session` and return the synthesized result.

    `on_update` is called after every tick and once more after completion.
    Cancelling the awaiting task resets the session to idle.
    """

    session.begin(raw_target)
    return await drive_scan(session, on_update=on_update)


async def drive_scan(
    session: ScanSession,
    *,
    on_update: Callable[[ScanSession], None] | None = None,
) -> SynthesizedResult:
    """
    Pace an already begun session to completion.

    Lets a UI call `session.begin()` synchronously, render the scanning state,
    and only then hand the session to the event loop.
    """

    if session.status != "scanning":
        raise RuntimeError("drive_scan() needs a session in the scanning state.")
    cfg = session.config

    def _notify() -> None:
        if on_update is not None:
            on_update(session)

    try:
        while True:
            await asyncio.sleep(cfg.tick_seconds)
            done = session.tick()
            _notify()
            if done:
                break

        await asyncio.sleep(cfg.completion_delay_seconds)
        result = session.complete()
    except asyncio.CancelledError:
        logger.debug("Scan cancelled", extra={"target": session.target})
        session.reset()
        raise

    _notify()
    return result
