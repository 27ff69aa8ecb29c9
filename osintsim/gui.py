# file: osintsim/gui.py
"""
PySide6 GUI (non-blocking via qasync).

Single window with the three scan states:
- idle: target input and INITIATE button
- scanning: progress bar and operator log lines
- complete: result card with NEW SEARCH / COPY DATA / EXPORT REPORT

The falling-glyph background sits behind everything and can be toggled.

Install GUI dependencies:
    pip install 'osintsim[gui]'
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from osintsim.config import OsintsimSettings
from osintsim.core.model import RISK_COLORS, SynthesizedResult
from osintsim.core.scan import ScanInProgressError, ScanSession, ScanStatus, drive_scan
from osintsim.core.target import EmptyTargetError, TargetTooShortError, is_scannable
from osintsim.io.report import (
    REPORT_TARGET_ID,
    SIMULATION_DISCLAIMER,
    ClipboardUnavailableError,
    build_report,
    copy_summary,
    export_csv,
    export_json,
    export_text,
    generate_pdf,
    report_filename,
)

logger = logging.getLogger(__name__)

_ACCENT = "#22c55e"


@dataclass(frozen=True, slots=True)
class PanelState:
    """Which parts of the window are shown or enabled for a scan status."""

    input_visible: bool
    progress_visible: bool
    report_visible: bool
    input_enabled: bool
    scan_label: str


def panel_state(status: ScanStatus) -> PanelState:
    scanning = status == "scanning"
    return PanelState(
        input_visible=status in ("idle", "scanning"),
        progress_visible=scanning,
        report_visible=status == "complete",
        input_enabled=not scanning,
        scan_label="SCANNING..." if scanning else "INITIATE",
    )


def create_main_window(settings: OsintsimSettings) -> Any:
    """
    Build the main window. A `QApplication` must already exist.
    """

    try:
        from PySide6.QtCore import Qt
        from PySide6.QtWidgets import (
            QComboBox,
            QFileDialog,
            QFrame,
            QGridLayout,
            QHBoxLayout,
            QLabel,
            QLineEdit,
            QListWidget,
            QMessageBox,
            QProgressBar,
            QPushButton,
            QVBoxLayout,
            QWidget,
        )
        from qasync import asyncSlot
    except Exception as exc:  # pragma: no cover (optional dependency)
        raise RuntimeError(
            "GUI dependencies not installed. Install with `pip install 'osintsim[gui]'`."
        ) from exc

    from osintsim.gui_rain import RainWidgetProtocol, create_rain_widget

    class MainWindow(QWidget):
        def __init__(self, settings: OsintsimSettings) -> None:
            super().__init__()
            self._settings = settings
            self._session = ScanSession(config=settings.scan_config(), rng=random.Random())
            self._tasks: set[asyncio.Task[Any]] = set()

            self.setWindowTitle("CYBER_OSINT (simulation)")
            self.setStyleSheet(
                "QWidget { color: #4ade80; font-family: monospace; }"
                "QLineEdit, QListWidget { background: #000; border: 1px solid #14532d; }"
                "QPushButton { background: #052e16; border: 1px solid #16a34a; padding: 6px 14px; }"
                "QPushButton:disabled { color: #14532d; }"
            )

            rain_widget = create_rain_widget(
                settings.rain_config(), parent=self, active=settings.rain_enabled
            )
            self.rain = cast(RainWidgetProtocol, rain_widget)
            self._rain_widget = cast(QWidget, rain_widget)
            self._rain_widget.lower()

            root = QVBoxLayout()

            top_row = QHBoxLayout()
            top_row.addStretch(1)
            self.matrix_btn = QPushButton()
            top_row.addWidget(self.matrix_btn)
            root.addLayout(top_row)

            title = QLabel("CYBER_OSINT")
            title.setAlignment(Qt.AlignmentFlag.AlignCenter)
            title.setStyleSheet("font-size: 40px; font-weight: bold;")
            root.addWidget(title)
            subtitle = QLabel("NUCLEAR PROBE V.2025 // UNRESTRICTED ACCESS")
            subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
            root.addWidget(subtitle)

            # Input panel (idle + scanning)
            self.input_panel = QFrame()
            input_layout = QVBoxLayout()
            input_row = QHBoxLayout()
            self.target_input = QLineEdit()
            self.target_input.setPlaceholderText("ENTER TARGET NUMBER (+86...)")
            input_row.addWidget(self.target_input, 1)
            self.scan_btn = QPushButton("INITIATE")
            self.scan_btn.setEnabled(False)
            input_row.addWidget(self.scan_btn)
            input_layout.addLayout(input_row)
            hint_row = QHBoxLayout()
            hint_row.addWidget(QLabel("SUPPORTED: +86 / GLOBAL / VOIP"))
            hint_row.addStretch(1)
            hint_row.addWidget(QLabel("DATABASE: 105,402,110 RECORDS"))
            input_layout.addLayout(hint_row)
            self.input_panel.setLayout(input_layout)
            root.addWidget(self.input_panel)

            # Progress panel (scanning)
            self.progress_panel = QFrame()
            progress_layout = QVBoxLayout()
            progress_header = QHBoxLayout()
            progress_header.addWidget(QLabel("BRUTE_FORCING..."))
            progress_header.addStretch(1)
            self.percent_label = QLabel("0%")
            progress_header.addWidget(self.percent_label)
            progress_layout.addLayout(progress_header)
            self.progress = QProgressBar()
            self.progress.setRange(0, 100)
            self.progress.setTextVisible(False)
            progress_layout.addWidget(self.progress)
            self.log_list = QListWidget()
            progress_layout.addWidget(self.log_list)
            self.progress_panel.setLayout(progress_layout)
            root.addWidget(self.progress_panel)

            # Result card (complete)
            self.report_card = QFrame()
            self.report_card.setObjectName(REPORT_TARGET_ID)
            self.report_card.setStyleSheet(
                f"QFrame#{REPORT_TARGET_ID} {{ background: #000; border: 1px solid {_ACCENT}; }}"
            )
            card = QGridLayout()
            card.addWidget(QLabel("TARGET_ANALYSIS_REPORT"), 0, 0)
            self.risk_badge = QLabel()
            card.addWidget(self.risk_badge, 0, 1, Qt.AlignmentFlag.AlignRight)
            card.addWidget(QLabel("CONFIDENTIAL // EYES ONLY"), 1, 0)
            self._fields: dict[str, QLabel] = {}
            left = ("Carrier", "Location", "Line Type")
            right = ("Data Leaks Found", "Latest Breach", "Associated Accounts")
            for row, name in enumerate(left, start=2):
                self._fields[name] = QLabel("-")
                card.addWidget(self._labelled(name, self._fields[name]), row, 0)
            for row, name in enumerate(right, start=2):
                self._fields[name] = QLabel("-")
                card.addWidget(self._labelled(name, self._fields[name]), row, 1)
            card.addWidget(QLabel("DETECTED_FOOTPRINTS:"), 5, 0)
            self.tags_label = QLabel("")
            card.addWidget(self.tags_label, 6, 0, 1, 2)
            self.report_card.setLayout(card)
            root.addWidget(self.report_card)

            # Actions (complete)
            self.actions_panel = QFrame()
            actions = QHBoxLayout()
            actions.addStretch(1)
            self.reset_btn = QPushButton("NEW SEARCH")
            self.copy_btn = QPushButton("COPY DATA")
            self.export_format = QComboBox()
            self.export_format.addItems(["png", "json", "csv", "pdf", "txt"])
            self.export_btn = QPushButton("EXPORT REPORT")
            for w in (self.reset_btn, self.copy_btn, self.export_format, self.export_btn):
                actions.addWidget(w)
            actions.addStretch(1)
            self.actions_panel.setLayout(actions)
            root.addWidget(self.actions_panel)

            root.addStretch(1)
            footer = QLabel(f"SIMULATION MODE ONLY\n{SIMULATION_DISCLAIMER}")
            footer.setWordWrap(True)
            footer.setAlignment(Qt.AlignmentFlag.AlignCenter)
            footer.setStyleSheet("color: #6b7280; font-size: 10px;")
            root.addWidget(footer)

            self.setLayout(root)

            self.target_input.textChanged.connect(self._on_input_changed)
            self.target_input.returnPressed.connect(self.on_scan)
            self.scan_btn.clicked.connect(self.on_scan)
            self.reset_btn.clicked.connect(self.on_reset)
            self.copy_btn.clicked.connect(self.on_copy)
            self.export_btn.clicked.connect(self.on_export)
            self.matrix_btn.clicked.connect(self.on_toggle_matrix)

            self._update_matrix_button()
            self._apply_status()

        @property
        def session(self) -> ScanSession:
            return self._session

        @staticmethod
        def _labelled(name: str, value: QLabel) -> QWidget:
            box = QWidget()
            layout = QVBoxLayout()
            layout.setContentsMargins(0, 0, 0, 0)
            caption = QLabel(name.upper())
            caption.setStyleSheet("color: #6b7280; font-size: 10px;")
            layout.addWidget(caption)
            layout.addWidget(value)
            box.setLayout(layout)
            return box

        def _apply_status(self) -> None:
            state = panel_state(self._session.status)
            self.input_panel.setVisible(state.input_visible)
            self.progress_panel.setVisible(state.progress_visible)
            self.report_card.setVisible(state.report_visible)
            self.actions_panel.setVisible(state.report_visible)
            self.target_input.setEnabled(state.input_enabled)
            self.scan_btn.setText(state.scan_label)
            self._on_input_changed(self.target_input.text())

        def _on_input_changed(self, text: str) -> None:
            ok = is_scannable(text, min_length=self._settings.min_target_length)
            self.scan_btn.setEnabled(ok and self._session.status != "scanning")

        def _render_session(self, session: ScanSession) -> None:
            self.progress.setValue(int(session.progress))
            self.percent_label.setText(f"{round(session.progress)}%")
            self.log_list.clear()
            for entry in session.logs:
                self.log_list.addItem(f"[{entry.time_label()}] > {entry.text}")
            self.log_list.scrollToBottom()

        def _render_result(self, result: SynthesizedResult) -> None:
            color = RISK_COLORS[result.risk_level]
            self.risk_badge.setText(f"RISK: {result.risk_score}/100")
            self.risk_badge.setStyleSheet(
                f"color: {color}; border: 2px solid {color}; padding: 4px;"
            )
            self._fields["Carrier"].setText(result.carrier)
            self._fields["Location"].setText(result.location)
            line = result.line_type + ("  [VOIP DETECTED]" if result.is_voip else "")
            self._fields["Line Type"].setText(line)
            self._fields["Data Leaks Found"].setText(f"{result.leak_count} RECORDS")
            self._fields["Latest Breach"].setText(result.last_leak_source)
            self._fields["Associated Accounts"].setText(f"~{result.linked_accounts} Platforms")
            self.tags_label.setText("  ".join(f"[{t.upper()}]" for t in result.tags))

        def begin_scan(self, raw: str) -> bool:
            """Enter the scanning state and render it; False if the target is rejected."""

            try:
                self._session.begin(raw)
            except (EmptyTargetError, TargetTooShortError) as exc:
                QMessageBox.warning(self, "Invalid target", str(exc))
                return False
            except ScanInProgressError:
                return False
            self.log_list.clear()
            self.progress.setValue(0)
            self.percent_label.setText("0%")
            self._apply_status()
            return True

        @asyncSlot()
        async def on_scan(self) -> None:
            if not self.begin_scan(self.target_input.text()):
                return

            task: asyncio.Task[SynthesizedResult] = asyncio.create_task(
                drive_scan(self._session, on_update=self._render_session)
            )
            self._tasks.add(task)
            try:
                result = await task
            except asyncio.CancelledError:
                return
            finally:
                self._tasks.discard(task)
                self._apply_status()

            self._render_result(result)
            self._apply_status()

        def on_reset(self) -> None:
            self._cancel_tasks()
            self._session.reset()
            self.target_input.clear()
            self.log_list.clear()
            self._apply_status()

        def on_copy(self) -> None:
            result = self._session.result
            if result is None:
                return
            try:
                copy_summary(result)
            except ClipboardUnavailableError as exc:
                QMessageBox.warning(self, "Copy failed", str(exc))
                return
            QMessageBox.information(self, "Copied", "ENCRYPTED TEXT COPIED TO CLIPBOARD")

        def on_export(self) -> None:
            result = self._session.result
            if result is None:
                QMessageBox.information(self, "No report", "Run a scan first.")
                return

            fmt = self.export_format.currentText().lower()
            filter_map = {
                "png": "PNG Images (*.png)",
                "json": "JSON Files (*.json)",
                "csv": "CSV Files (*.csv)",
                "pdf": "PDF Files (*.pdf)",
                "txt": "Text Files (*.txt)",
            }
            file_path, _ = QFileDialog.getSaveFileName(
                self,
                "Export report",
                report_filename(result.target, suffix=f".{fmt}"),
                filter_map.get(fmt, "All Files (*)"),
            )
            if not file_path:
                return

            path = Path(file_path)
            try:
                if fmt == "png":
                    self._capture_report(path)
                else:
                    report = build_report(result)
                    if fmt == "json":
                        export_json(report, path)
                    elif fmt == "csv":
                        export_csv(report, path)
                    elif fmt == "pdf":
                        generate_pdf(report, path)
                    elif fmt == "txt":
                        export_text(report, path)
                    else:
                        raise ValueError(f"Unknown format: {fmt}")
            except Exception as exc:
                QMessageBox.warning(self, "Export failed", f"{type(exc).__name__}: {exc}")
                return

            QMessageBox.information(self, "Report saved", f"Saved to {file_path}")

        def _capture_report(self, path: Path) -> None:
            target = self.findChild(QFrame, REPORT_TARGET_ID)
            if target is None:
                raise RuntimeError("Report card is not available for capture.")
            pixmap = target.grab()
            scale = self._settings.export_scale
            if scale > 1:
                pixmap = pixmap.scaled(
                    pixmap.width() * scale,
                    pixmap.height() * scale,
                    Qt.AspectRatioMode.KeepAspectRatio,
                    Qt.TransformationMode.SmoothTransformation,
                )
            if not pixmap.save(str(path), "PNG"):
                raise OSError(f"Could not write {path}")

        def on_toggle_matrix(self) -> None:
            self.rain.set_active(not self.rain.is_active())
            self._update_matrix_button()

        def _update_matrix_button(self) -> None:
            self.matrix_btn.setText("DISABLE_MATRIX" if self.rain.is_active() else "ENABLE_MATRIX")

        def _cancel_tasks(self) -> None:
            for t in list(self._tasks):
                t.cancel()

        def resizeEvent(self, event: Any) -> None:  # noqa: N802
            self._rain_widget.setGeometry(self.rect())
            super().resizeEvent(event)

        def closeEvent(self, event: Any) -> None:  # noqa: N802
            self._cancel_tasks()
            self.rain.shutdown()
            event.accept()

    return MainWindow(settings)


def run_gui(settings: OsintsimSettings) -> None:
    try:
        from PySide6.QtWidgets import QApplication
        from qasync import QEventLoop
    except Exception as exc:  # pragma: no cover (optional dependency)
        raise RuntimeError(
            "GUI dependencies not installed. Install with `pip install 'osintsim[gui]'`."
        ) from exc

    app = QApplication([])
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)

    w = create_main_window(settings)
    w.resize(960, 720)
    w.show()

    with loop:
        loop.run_forever()
