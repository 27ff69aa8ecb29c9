# file: osintsim/animation/scheduler.py
"""asyncio frame scheduler for headless hosts: one `call_later` handle per requested frame."""

from __future__ import annotations

import asyncio
from typing import Callable


class AsyncioFrameScheduler:
    """
    Paces a `RainAnimator` on the running asyncio loop.

    `after_frame` runs after every scheduled frame, the same hook the Qt host
    uses to repaint; the `rain` CLI command uses it to count rendered frames.
    """

    def __init__(
        self,
        *,
        fps: float = 60.0,
        loop: asyncio.AbstractEventLoop | None = None,
        after_frame: Callable[[], None] | None = None,
    ) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._interval = 1.0 / fps
        self._loop = loop
        self._after_frame = after_frame

    @property
    def interval(self) -> float:
        return self._interval

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()

        def _fire() -> None:
            callback()
            if self._after_frame is not None:
                self._after_frame()

        return loop.call_later(self._interval, _fire)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
