# file: osintsim/animation/rain.py
"""
Falling-glyph background animation.

The animator is host-agnostic: it draws through a `Surface` and schedules its
next frame through a `FrameScheduler`, both supplied by the host (Pillow +
asyncio for headless rendering, QImage + QTimer in the GUI).

Per frame:
- inactive: fade the whole surface a little towards black and draw nothing
- active: fade slightly (leaves trails), then draw one glyph per column and
  advance each column's drop by one cell; drops below the bottom edge restart
  from the top with a small probability, which gives streaks of varying length
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

DEFAULT_GLYPHS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789@#$%^&*()"
INITIAL_DROP = 1


class Surface(Protocol):
    """A resizable 2D drawing target owned by a single animator."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def fade(self, alpha: float) -> None:
        """Paint black with opacity `alpha` (0..1) over the whole surface."""

    def draw_glyph(self, glyph: str, x: int, y: int, color: str) -> None:
        """Draw `glyph` with its baseline at `y` and left edge at `x`."""

    def resize(self, width: int, height: int) -> None: ...


class FrameScheduler(Protocol):
    """Request-next-frame style scheduling with cancellable handles."""

    def request_frame(self, callback: Callable[[], None]) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


@dataclass(frozen=True, slots=True)
class RainConfig:
    cell_size: int = 14
    glyphs: str = DEFAULT_GLYPHS
    accent_color: str = "#00ff00"
    highlight_color: str = "#ffffff"
    highlight_probability: float = 0.05
    reset_probability: float = 0.025
    trail_alpha: float = 0.05
    fade_alpha: float = 0.1
    fps: float = 60.0


@dataclass
class RainState:
    """Current row offset (in cells) of every column's drop."""

    cell_size: int
    drops: list[int] = field(default_factory=list)

    @property
    def columns(self) -> int:
        return len(self.drops)

    def reset(self, width: int) -> None:
        columns = max(0, width) // self.cell_size
        self.drops = [INITIAL_DROP] * columns


class RainAnimator:
    def __init__(
        self,
        surface: Surface | None,
        scheduler: FrameScheduler,
        *,
        config: RainConfig | None = None,
        rng: random.Random | None = None,
        active: bool = True,
    ) -> None:
        self._config = config or RainConfig()
        if self._config.cell_size <= 0:
            raise ValueError("cell_size must be positive")
        if not self._config.glyphs:
            raise ValueError("glyphs must not be empty")

        self._surface = surface
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._handle: Any = None
        self._running = False
        self.active = active
        self.state = RainState(cell_size=self._config.cell_size)
        if surface is not None:
            self.state.reset(surface.width)

    @property
    def config(self) -> RainConfig:
        return self._config

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """
        Start the frame loop.

        Returns False without scheduling anything when there is no surface to
        draw on. Calling start() on a running animator is a no-op.
        """

        if self._surface is None:
            logger.debug("Rain animator not started: no drawing surface")
            return False
        if self._running:
            return True
        self._running = True
        logger.debug("Rain animator started", extra={"columns": self.state.columns})
        self._on_frame()
        return True

    def stop(self) -> None:
        """Cancel the pending frame, if any. Safe to call repeatedly."""

        if self._handle is not None:
            self._scheduler.cancel_frame(self._handle)
            self._handle = None
        if self._running:
            logger.debug("Rain animator stopped")
        self._running = False

    def resize(self, width: int, height: int) -> None:
        """Resize the surface and restart every column from the top."""

        if self._surface is not None:
            self._surface.resize(width, height)
        self.state.reset(width)
        logger.debug(
            "Rain surface resized",
            extra={"width": width, "height": height, "columns": self.state.columns},
        )

    def _on_frame(self) -> None:
        self._handle = None
        if not self._running:
            return
        self.step()
        self._handle = self._scheduler.request_frame(self._on_frame)

    def step(self) -> None:
        """Render exactly one frame."""

        surface = self._surface
        if surface is None:
            return

        cfg = self._config
        if not self.active:
            surface.fade(cfg.fade_alpha)
            return

        surface.fade(cfg.trail_alpha)

        cell = cfg.cell_size
        height = surface.height
        rng = self._rng
        drops = self.state.drops
        for i, drop in enumerate(drops):
            glyph = cfg.glyphs[int(rng.random() * len(cfg.glyphs))]
            color = (
                cfg.highlight_color
                if rng.random() < cfg.highlight_probability
                else cfg.accent_color
            )
            surface.draw_glyph(glyph, i * cell, drop * cell, color)

            if drop * cell > height and rng.random() < cfg.reset_probability:
                drop = 0
            drops[i] = drop + 1
