# file: osintsim/animation/surface.py
"""
Pillow-backed raster surface for headless rendering (CLI previews and tests).
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont


def _fade_table(alpha: float) -> list[int]:
    keep = 1.0 - min(1.0, max(0.0, alpha))
    # Floor so repeated fades always reach 0 instead of stalling on rounding.
    return [int(v * keep) for v in range(256)] * 3


class ImageSurface:
    """RGB image surface implementing the `Surface` protocol."""

    def __init__(self, width: int, height: int, *, font_size: int = 14) -> None:
        self._font_size = font_size
        self._font = ImageFont.load_default(size=font_size)
        self._new_image(width, height)

    def _new_image(self, width: int, height: int) -> None:
        self._image = Image.new("RGB", (max(1, width), max(1, height)), (0, 0, 0))
        self._draw = ImageDraw.Draw(self._image)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def image(self) -> Image.Image:
        return self._image

    def fade(self, alpha: float) -> None:
        self._image = self._image.point(_fade_table(alpha))
        self._draw = ImageDraw.Draw(self._image)

    def draw_glyph(self, glyph: str, x: int, y: int, color: str) -> None:
        self._draw.text((x, y - self._font_size), glyph, fill=color, font=self._font)

    def resize(self, width: int, height: int) -> None:
        self._new_image(width, height)

    def fill(self, color: str) -> None:
        self._draw.rectangle((0, 0, self.width, self.height), fill=color)

    def save(self, path: Path) -> None:
        self._image.save(path, format="PNG")
