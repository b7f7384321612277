"""Menu bar / system tray presence.

The tray shows the countdown as its "title": the tooltip and the first
(disabled) menu entry always carry the latest ``MM:SS`` from the
controller.  It is purely a display; nothing here feeds back into the
timer except the menu commands, which go through the controller.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QIcon, QImage, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QMenu, QSystemTrayIcon

from ..timer.controller import TimerController
from ..timer.engine import TimerMode, TimerStatus
from .timer_widget import MODE_LABELS


def make_tray_icon(status: TimerStatus, mode: TimerMode) -> QIcon:
    """Generate a 32×32 monochrome template icon for the macOS menu bar.

    - IDLE:            thin circle outline
    - RUNNING (work):  filled circle
    - RUNNING (break): circle outline with a centre dot
    - PAUSED:          two vertical pause bars
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)  # template image: macOS tints automatically
    cx, cy, r = size // 2, size // 2, 24

    if status is TimerStatus.PAUSED:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        bar_w, bar_h, gap = 8, 28, 6
        y = cy - bar_h // 2
        p.drawRoundedRect(cx - gap - bar_w, y, bar_w, bar_h, 3, 3)
        p.drawRoundedRect(cx + gap, y, bar_w, bar_h, 3, 3)
    elif status is TimerStatus.RUNNING and mode is TimerMode.WORK:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if status is TimerStatus.RUNNING:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            dot_r = 6
            p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class TrayDisplay(QObject):
    """Owns the tray icon and its menu.

    Signals
    -------
    show_requested()
        Tray icon clicked or "Show Pomobar" chosen.
    quit_requested()
        "Quit" chosen.
    """

    show_requested = pyqtSignal()
    quit_requested = pyqtSignal()

    def __init__(self, controller: TimerController, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._engine = controller.engine
        self._title = controller.display_text

        self._icon = QSystemTrayIcon(self)
        self._icon.activated.connect(self._on_activated)
        self._build_menu()

        controller.display_changed.connect(self.show_time)
        self._engine.state_changed.connect(self.update_status)
        self.update_status(self._engine.status)

    # ── menu ──────────────────────────────────────────────────────────

    def _build_menu(self) -> None:
        menu = QMenu()

        self._title_action = menu.addAction(self._title)
        self._title_action.setEnabled(False)
        menu.addSeparator()

        self._start_action = menu.addAction("Start")
        self._start_action.triggered.connect(self._controller.toggle)

        reset_action = menu.addAction("Reset")
        reset_action.triggered.connect(self._controller.reset)

        break_action = menu.addAction("Take a Break")
        break_action.triggered.connect(self._controller.start_break)

        menu.addSeparator()

        show_action = menu.addAction("Show Pomobar")
        show_action.triggered.connect(self.show_requested.emit)

        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self.quit_requested.emit)

        self._menu = menu
        self._icon.setContextMenu(menu)

    # ── display ───────────────────────────────────────────────────────

    def show_time(self, text: str) -> None:
        """Display collaborator entry point: receives ``MM:SS``."""
        self._title = text
        self._title_action.setText(text)
        self._icon.setToolTip(f"Pomobar — {MODE_LABELS[self._engine.mode].title()} {text}")

    def update_status(self, status: TimerStatus) -> None:
        self._icon.setIcon(make_tray_icon(status, self._engine.mode))
        if status is TimerStatus.RUNNING:
            self._start_action.setText("Pause")
        elif status is TimerStatus.PAUSED:
            self._start_action.setText("Resume")
        else:
            self._start_action.setText("Start")
        self.show_time(self._title)

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self.show_requested.emit()

    # ── public ────────────────────────────────────────────────────────

    @property
    def icon(self) -> QSystemTrayIcon:
        return self._icon

    @property
    def title(self) -> str:
        return self._title

    @property
    def start_action_text(self) -> str:
        return self._start_action.text()

    def show(self) -> None:
        self._icon.show()

    def hide(self) -> None:
        self._icon.hide()
