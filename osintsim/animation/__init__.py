"""Falling-glyph background animation."""

from __future__ import annotations

from .rain import (
    DEFAULT_GLYPHS,
    INITIAL_DROP,
    FrameScheduler,
    RainAnimator,
    RainConfig,
    RainState,
    Surface,
)
from .scheduler import AsyncioFrameScheduler

__all__ = [
    "DEFAULT_GLYPHS",
    "INITIAL_DROP",
    "FrameScheduler",
    "RainAnimator",
    "RainConfig",
    "RainState",
    "Surface",
    "AsyncioFrameScheduler",
]
