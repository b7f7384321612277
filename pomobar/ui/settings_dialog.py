"""Settings dialog for Pomobar.

A modal dialog for interval lengths, auto-start behaviour, sound and
notifications.  Every change is saved immediately; duration edits are
followed by ``on_durations_changed`` so an idle timer picks up the new
length straight away.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QSlider, QCheckBox, QPushButton,
    QFrame, QWidget,
)

from ..settings import DURATION_LIMITS, SettingsStore
from ..timer.engine import TimerMode


class SettingsDialog(QDialog):
    """Modal dialog for all user preferences."""

    def __init__(
        self,
        store: SettingsStore,
        parent: QWidget | None = None,
        *,
        on_durations_changed: Callable[[], None] | None = None,
        sound_preview_callback: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._store = store
        self._on_durations_changed = on_durations_changed
        self._sound_preview = sound_preview_callback
        self._populating = False

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── Durations ────────────────────────────────────────────────
        root.addWidget(self._section_label("Durations"))
        timer_form = QFormLayout()
        timer_form.setHorizontalSpacing(20)
        timer_form.setVerticalSpacing(10)

        self._duration_spins: dict[TimerMode, QSpinBox] = {}
        for mode, label in (
            (TimerMode.WORK, "Work:"),
            (TimerMode.SHORT_BREAK, "Short break:"),
            (TimerMode.LONG_BREAK, "Long break:"),
        ):
            spin = QSpinBox()
            spin.setRange(1, DURATION_LIMITS[mode])
            spin.setSuffix(" min")
            spin.valueChanged.connect(
                lambda value, m=mode: self._on_duration_changed(m, value)
            )
            self._duration_spins[mode] = spin
            timer_form.addRow(label, spin)

        self._auto_breaks_cb = QCheckBox("Auto-start breaks")
        self._auto_breaks_cb.toggled.connect(self._on_auto_start_changed)
        timer_form.addRow("", self._auto_breaks_cb)

        self._auto_work_cb = QCheckBox("Auto-start focus after breaks")
        self._auto_work_cb.toggled.connect(self._on_auto_start_changed)
        timer_form.addRow("", self._auto_work_cb)

        root.addLayout(timer_form)

        count_row = QHBoxLayout()
        self._count_label = QLabel("")
        self._count_label.setObjectName("mutedLabel")
        reset_count_btn = QPushButton("Reset count")
        reset_count_btn.setObjectName("secondaryButton")
        reset_count_btn.clicked.connect(self._on_reset_count)
        count_row.addWidget(self._count_label)
        count_row.addStretch()
        count_row.addWidget(reset_count_btn)
        root.addLayout(count_row)

        root.addWidget(self._separator())

        # ── Sound & Notifications ────────────────────────────────────
        root.addWidget(self._section_label("Sound & Notifications"))
        snd_form = QFormLayout()
        snd_form.setHorizontalSpacing(20)
        snd_form.setVerticalSpacing(10)

        self._sound_cb = QCheckBox("Completion sounds")
        self._sound_cb.toggled.connect(self._on_sound_changed)
        snd_form.addRow("", self._sound_cb)

        vol_row = QHBoxLayout()
        vol_row.setSpacing(10)
        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setTickInterval(10)
        self._vol_label = QLabel("70%")
        self._vol_label.setMinimumWidth(36)
        self._vol_slider.valueChanged.connect(self._on_sound_changed)
        self._vol_slider.sliderReleased.connect(self._on_volume_released)
        vol_row.addWidget(self._vol_slider)
        vol_row.addWidget(self._vol_label)
        vol_wrapper = QWidget()
        vol_wrapper.setLayout(vol_row)
        snd_form.addRow("Volume:", vol_wrapper)

        self._notif_cb = QCheckBox("Desktop notifications")
        self._notif_cb.toggled.connect(self._on_notifications_changed)
        snd_form.addRow("", self._notif_cb)

        root.addLayout(snd_form)

        # ── buttons ──────────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        defaults_btn = QPushButton("Reset to Defaults")
        defaults_btn.setObjectName("secondaryButton")
        defaults_btn.clicked.connect(self._on_reset_defaults)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(defaults_btn)
        btn_row.addStretch()
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    # ── helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        line.setStyleSheet("background-color: rgba(255,255,255,0.08);")
        return line

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE FROM SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        self._populating = True
        try:
            for mode, minutes in self._store.get_durations().items():
                self._duration_spins[mode].setValue(minutes)
            s = self._store.settings
            self._auto_breaks_cb.setChecked(bool(s.auto_start_breaks))
            self._auto_work_cb.setChecked(bool(s.auto_start_work))
            self._sound_cb.setChecked(self._store.sound_enabled)
            self._vol_slider.setValue(self._store.sound_volume)
            self._vol_label.setText(f"{self._store.sound_volume}%")
            self._notif_cb.setChecked(self._store.notifications_enabled)
            self._refresh_count()
        finally:
            self._populating = False

    def _refresh_count(self) -> None:
        count = self._store.work_session_count
        interval = self._store.long_break_interval
        self._count_label.setText(
            f"Focus sessions toward a long break: {min(count, interval)} / {interval}"
        )

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS (saved immediately)
    # ══════════════════════════════════════════════════════════════════

    def _on_duration_changed(self, mode: TimerMode, value: int) -> None:
        if self._populating:
            return
        if self._store.set_duration(mode, value):
            self._notify_durations()

    def _on_reset_defaults(self) -> None:
        self._store.reset_to_defaults()
        self._populate()
        self._notify_durations()

    def _on_auto_start_changed(self) -> None:
        if self._populating:
            return
        self._store.set_auto_start(
            breaks=self._auto_breaks_cb.isChecked(),
            work=self._auto_work_cb.isChecked(),
        )

    def _on_sound_changed(self) -> None:
        self._vol_label.setText(f"{self._vol_slider.value()}%")
        if self._populating:
            return
        self._store.set_sound(
            enabled=self._sound_cb.isChecked(),
            volume=self._vol_slider.value(),
        )

    def _on_volume_released(self) -> None:
        """Play a click when the user releases the volume slider."""
        if self._sound_preview:
            self._sound_preview()

    def _on_notifications_changed(self, checked: bool) -> None:
        if self._populating:
            return
        self._store.set_notifications_enabled(checked)

    def _on_reset_count(self) -> None:
        self._store.reset_work_session_count()
        self._refresh_count()

    def _notify_durations(self) -> None:
        if self._on_durations_changed:
            self._on_durations_changed()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def store(self) -> SettingsStore:
        return self._store

    def duration_spin(self, mode: TimerMode) -> QSpinBox:
        return self._duration_spins[mode]
