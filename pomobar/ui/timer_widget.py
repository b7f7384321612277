"""Timer panel — the main view of the popup window.

Layout (top → bottom):
    - Mode label ("FOCUS", "SHORT BREAK", "LONG BREAK")
    - Remaining time (MM:SS)
    - Start/Pause + Reset
    - "Take a break" shortcut
    - Mode switcher (Work / Short / Long)
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QButtonGroup,
)

from ..timer.controller import TimerController
from ..timer.engine import TimerMode, TimerStatus, format_time
from .styles import MODE_COLORS


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.WORK:        "FOCUS",
    TimerMode.SHORT_BREAK: "SHORT BREAK",
    TimerMode.LONG_BREAK:  "LONG BREAK",
}

MODE_BUTTON_LABELS: dict[TimerMode, str] = {
    TimerMode.WORK:        "Work",
    TimerMode.SHORT_BREAK: "Short",
    TimerMode.LONG_BREAK:  "Long",
}


class TimerWidget(QWidget):
    """Countdown display and controls bound to a :class:`TimerController`."""

    def __init__(
        self, controller: TimerController, parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._engine = controller.engine
        self._build_ui()
        self._connect_signals()
        self._on_state_changed(self._engine.status)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(10)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._mode_label = QLabel("", card)
        self._mode_label.setObjectName("modeLabel")
        self._mode_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._mode_label)

        self._time_label = QLabel(format_time(self._engine.remaining), card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        # ── main controls ────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")

        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("secondaryButton")

        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._reset_btn)
        layout.addLayout(btn_row)

        self._break_btn = QPushButton("Take a break", card)
        self._break_btn.setObjectName("secondaryButton")
        self._break_btn.setToolTip("Long break after every few focus sessions")
        layout.addWidget(self._break_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        # ── mode switcher ────────────────────────────────────────────
        mode_row = QHBoxLayout()
        mode_row.setSpacing(6)
        mode_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode in TimerMode:
            btn = QPushButton(MODE_BUTTON_LABELS[mode], card)
            btn.setObjectName("modeButton")
            btn.setCheckable(True)
            self._mode_group.addButton(btn)
            self._mode_buttons[mode] = btn
            mode_row.addWidget(btn)
        layout.addLayout(mode_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._controller.toggle)
        self._reset_btn.clicked.connect(self._controller.reset)
        self._break_btn.clicked.connect(self._controller.start_break)
        for mode, btn in self._mode_buttons.items():
            btn.clicked.connect(lambda _=False, m=mode: self._controller.set_mode(m))

        self._controller.display_changed.connect(self._time_label.setText)
        self._engine.state_changed.connect(self._on_state_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_state_changed(self, status: TimerStatus) -> None:
        if status is TimerStatus.RUNNING:
            self._start_pause_btn.setText("Pause")
        elif status is TimerStatus.PAUSED:
            self._start_pause_btn.setText("Resume")
        else:
            self._start_pause_btn.setText("Start")

        mode = self._engine.mode
        self._mode_label.setText(MODE_LABELS[mode])
        self._mode_buttons[mode].setChecked(True)
        self._time_label.setStyleSheet(f"color: {MODE_COLORS[mode]};")
        self._time_label.setText(format_time(self._engine.remaining))

    # ── read-only accessors (used by tests and the tray) ─────────────────

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def mode_text(self) -> str:
        return self._mode_label.text()

    @property
    def start_button_text(self) -> str:
        return self._start_pause_btn.text()
