"""Popup window and application shell for Pomobar.

``PomobarApp`` owns every long-lived object explicitly: the settings
store, the timer engine, the controller, the sound manager, the tray and
the notifier.  Nothing is a module-level singleton; ``shutdown()`` tears it
all down.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from PyQt6.QtCore import Qt, QEvent, QTimer
from PyQt6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QTabWidget,
)

from .audio.sounds import SoundManager
from .database.db import dispose_engine
from .notifications import Notifier
from .settings import SettingsStore
from .timer.controller import TimerController
from .timer.engine import TimerEngine
from .ui.stats_widget import StatsWidget
from .ui.styles import build_stylesheet, system_palette
from .ui.timer_widget import TimerWidget
from .ui.tray import TrayDisplay

logger = logging.getLogger(__name__)

WARNING_DISPLAY_MS = 6000


class PomobarApp(QWidget):
    """The popup window opened from the tray icon."""

    def __init__(
        self,
        store: SettingsStore,
        *,
        sound_manager: SoundManager | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Pomobar")
        self.setWindowFlag(Qt.WindowType.Tool, True)
        self.setMinimumSize(340, 420)

        self._store = store
        self._stopped = False

        # ── engine + controller ───────────────────────────────────────
        self._engine = TimerEngine(self, settings=store, clock=clock)

        if sound_manager is None:
            sound_manager = SoundManager(parent=self)
        self._sound_manager = sound_manager
        self._sound_manager.set_volume(store.sound_volume)
        self._sound_manager.set_enabled(store.sound_enabled)

        self._controller = TimerController(
            self._engine, store, self, sounds=self._sound_manager,
        )

        # ── tray + notifications ──────────────────────────────────────
        self._tray = TrayDisplay(self._controller, self)
        self._tray.show_requested.connect(self.toggle_visible)
        self._tray.quit_requested.connect(self.quit)
        self._notifier = Notifier(self._tray.icon, store)
        self._controller.set_notifier(self._notifier)

        # ── layout ────────────────────────────────────────────────────
        self._styled_mode = None
        self._restyle()
        root = QVBoxLayout(self)
        root.setContentsMargins(14, 10, 14, 10)
        root.setSpacing(8)

        header = QHBoxLayout()
        title = QLabel("Pomobar", self)
        title.setStyleSheet("font-size: 16px; font-weight: 700;")
        gear = QPushButton("⚙", self)
        gear.setObjectName("secondaryButton")
        gear.setFixedSize(32, 32)
        gear.setToolTip("Settings")
        gear.clicked.connect(self.open_settings)
        header.addWidget(title)
        header.addStretch()
        header.addWidget(gear)
        root.addLayout(header)

        self._tabs = QTabWidget(self)
        self._timer_widget = TimerWidget(self._controller, self._tabs)
        self._stats_widget = StatsWidget(self._tabs)
        self._tabs.addTab(self._timer_widget, "Timer")
        self._tabs.addTab(self._stats_widget, "Stats")
        self._tabs.currentChanged.connect(self._on_tab_changed)
        root.addWidget(self._tabs)

        self._warning_label = QLabel("", self)
        self._warning_label.setObjectName("warningLabel")
        self._warning_label.setVisible(False)
        root.addWidget(self._warning_label)

        self._warning_timer = QTimer(self)
        self._warning_timer.setSingleShot(True)
        self._warning_timer.setInterval(WARNING_DISPLAY_MS)
        self._warning_timer.timeout.connect(lambda: self._warning_label.setVisible(False))

        # ── wire signals ──────────────────────────────────────────────
        self._controller.persistence_failed.connect(self.show_warning)
        self._controller.session_completed.connect(self._on_session_completed)
        self._engine.state_changed.connect(lambda _status: self._restyle())

        self._tray.show()
        self._controller.activate()
        logger.info("Pomobar started (%s)", store.get_durations_label())

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def controller(self) -> TimerController:
        return self._controller

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def tray(self) -> TrayDisplay:
        return self._tray

    @property
    def warning_text(self) -> str:
        return self._warning_label.text()

    def open_settings(self) -> None:
        """Open the settings dialog; every edit is applied as it happens."""
        from .ui.settings_dialog import SettingsDialog

        def _preview_click():
            self._sound_manager.set_volume(self._store.sound_volume)
            self._sound_manager.set_enabled(self._store.sound_enabled)
            self._sound_manager.play("click")

        dlg = SettingsDialog(
            self._store,
            parent=self,
            on_durations_changed=self._controller.sync_with_settings,
            sound_preview_callback=_preview_click,
        )
        dlg.exec()
        self.apply_settings()

    def apply_settings(self) -> None:
        """Push current preferences into the subsystems."""
        self._controller.sync_with_settings()
        self._sound_manager.set_volume(self._store.sound_volume)
        self._sound_manager.set_enabled(self._store.sound_enabled)

    def show_warning(self, message: str) -> None:
        """Non-blocking notice, hidden again after a few seconds."""
        self._warning_label.setText(message)
        self._warning_label.setVisible(True)
        self._warning_timer.start()

    def toggle_visible(self) -> None:
        if self.isVisible():
            self.hide()
        else:
            self.show()
            self.raise_()
            self.activateWindow()

    def shutdown(self) -> None:
        """Stop polling, remove the tray icon and release the database."""
        if self._stopped:
            return
        self._stopped = True
        self._controller.shutdown()
        self._tray.hide()
        dispose_engine()
        logger.info("Pomobar stopped")

    def quit(self) -> None:
        self.shutdown()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    # ══════════════════════════════════════════════════════════════════
    #  SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_session_completed(self, data: dict) -> None:
        if self._tabs.currentWidget() is self._stats_widget:
            self._stats_widget.refresh()

    def _restyle(self) -> None:
        mode = self._engine.mode
        if mode is self._styled_mode:
            return
        self._styled_mode = mode
        self.setStyleSheet(build_stylesheet(system_palette(), mode))

    def _on_tab_changed(self, index: int) -> None:
        if self._tabs.widget(index) is self._stats_widget:
            self._stats_widget.refresh()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def changeEvent(self, event) -> None:  # type: ignore[override]
        """Hide when the popup loses focus, like a menu bar panel."""
        super().changeEvent(event)
        if (
            event.type() == QEvent.Type.ActivationChange
            and not self.isActiveWindow()
            and self.isVisible()
            and self._store.hide_on_blur
            and QApplication.activeModalWidget() is None
        ):
            self.hide()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Closing the popup only hides it; quitting is done from the tray."""
        event.ignore()
        self.hide()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles, Escape resets, B takes a break."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._controller.toggle()
        elif key == Qt.Key.Key_Escape:
            self._controller.reset()
        elif key == Qt.Key.Key_B and not event.modifiers():
            self._controller.start_break()
        else:
            super().keyPressEvent(event)
            return
        event.accept()
