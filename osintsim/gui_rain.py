# file: osintsim/gui_rain.py
"""Qt host for the falling-glyph background (QImage surface + QTimer frames)."""

from __future__ import annotations

import random
from typing import Any, Callable, Protocol

from osintsim.animation.rain import RainAnimator, RainConfig


class RainWidgetProtocol(Protocol):
    @property
    def animator(self) -> RainAnimator: ...

    def set_active(self, active: bool) -> None: ...

    def is_active(self) -> bool: ...

    def shutdown(self) -> None: ...


def create_rain_widget(
    config: RainConfig, *, parent: Any = None, active: bool = True
) -> RainWidgetProtocol:
    try:
        from PySide6.QtCore import Qt, QTimer
        from PySide6.QtGui import QColor, QFont, QImage, QPainter
        from PySide6.QtWidgets import QWidget
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "GUI dependencies not installed. Install with `pip install 'osintsim[gui]'`."
        ) from exc

    class QImageSurface:
        def __init__(self, width: int, height: int, *, font_px: int) -> None:
            self._font = QFont("monospace")
            self._font.setStyleHint(QFont.StyleHint.Monospace)
            self._font.setPixelSize(font_px)
            self._new_image(width, height)

        def _new_image(self, width: int, height: int) -> None:
            self.image = QImage(max(1, width), max(1, height), QImage.Format.Format_RGB32)
            self.image.fill(QColor(0, 0, 0))

        @property
        def width(self) -> int:
            return self.image.width()

        @property
        def height(self) -> int:
            return self.image.height()

        def fade(self, alpha: float) -> None:
            painter = QPainter(self.image)
            painter.fillRect(self.image.rect(), QColor(0, 0, 0, round(alpha * 255)))
            painter.end()

        def draw_glyph(self, glyph: str, x: int, y: int, color: str) -> None:
            painter = QPainter(self.image)
            painter.setFont(self._font)
            painter.setPen(QColor(color))
            painter.drawText(x, y, glyph)
            painter.end()

        def resize(self, width: int, height: int) -> None:
            self._new_image(width, height)

    class QtFrameScheduler:
        """
        Restarts one widget-owned single-shot QTimer per requested frame.

        The animator keeps at most one frame pending, so a single timer is
        enough; the timer itself is the handle.
        """

        def __init__(
            self, owner: QWidget, *, fps: float, after_frame: Callable[[], None]
        ) -> None:
            self._after_frame = after_frame
            self._callback: Callable[[], None] | None = None
            self._timer = QTimer(owner)
            self._timer.setSingleShot(True)
            self._timer.setTimerType(Qt.TimerType.PreciseTimer)
            self._timer.setInterval(max(1, round(1000 / fps)))
            self._timer.timeout.connect(self._fire)

        def _fire(self) -> None:
            callback, self._callback = self._callback, None
            if callback is not None:
                callback()
            self._after_frame()

        def request_frame(self, callback: Callable[[], None]) -> QTimer:
            self._callback = callback
            self._timer.start()
            return self._timer

        def cancel_frame(self, handle: QTimer) -> None:
            handle.stop()
            self._callback = None

    class RainWidget(QWidget):
        def __init__(self) -> None:
            super().__init__(parent)
            self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
            self._surface = QImageSurface(
                max(1, self.width()), max(1, self.height()), font_px=config.cell_size
            )
            self._animator = RainAnimator(
                self._surface,
                QtFrameScheduler(self, fps=config.fps, after_frame=self.update),
                config=config,
                rng=random.Random(),
                active=active,
            )

        @property
        def animator(self) -> RainAnimator:
            return self._animator

        def set_active(self, value: bool) -> None:
            self._animator.active = value

        def is_active(self) -> bool:
            return self._animator.active

        def shutdown(self) -> None:
            self._animator.stop()

        def paintEvent(self, event: Any) -> None:  # noqa: N802
            painter = QPainter(self)
            painter.setOpacity(0.6)
            painter.drawImage(0, 0, self._surface.image)
            painter.end()

        def resizeEvent(self, event: Any) -> None:  # noqa: N802
            size = event.size()
            self._animator.resize(size.width(), size.height())
            super().resizeEvent(event)

        # Frames only run while the widget is on screen.
        def showEvent(self, event: Any) -> None:  # noqa: N802
            self._animator.start()
            super().showEvent(event)

        def hideEvent(self, event: Any) -> None:  # noqa: N802
            self._animator.stop()
            super().hideEvent(event)

    return RainWidget()


__all__ = ["RainWidgetProtocol", "create_rain_widget"]
