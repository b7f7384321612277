"""Desktop notifications for finished intervals.

Notifications go through the tray icon's balloon messages.  "Permission"
means the user has notifications switched on and the platform tray can
actually show messages; without it ``notify()`` quietly does nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PyQt6.QtWidgets import QSystemTrayIcon

from .timer.engine import TimerMode

if TYPE_CHECKING:
    from .settings import SettingsStore

logger = logging.getLogger(__name__)


NOTIFICATION_TEXT: dict[TimerMode, tuple[str, str]] = {
    TimerMode.WORK: ("Focus session complete!", "Time for a break. Great work!"),
    TimerMode.SHORT_BREAK: ("Break is over", "Ready to focus again?"),
    TimerMode.LONG_BREAK: ("Long break is over", "Ready to get back to work?"),
}


class Notifier:
    """Shows a tray message when an interval completes."""

    def __init__(
        self,
        tray_icon: QSystemTrayIcon | None,
        settings: SettingsStore,
    ) -> None:
        self._tray = tray_icon
        self._settings = settings

    def permission_granted(self) -> bool:
        if not self._settings.notifications_enabled:
            return False
        if self._tray is None:
            return False
        return bool(self._tray.supportsMessages())

    def notify(self, mode: TimerMode) -> bool:
        """Announce that *mode* just finished.  Returns whether it was shown."""
        if not self.permission_granted():
            return False
        title, body = NOTIFICATION_TEXT[mode]
        self._tray.showMessage(title, body)
        logger.debug("Notified: %s", title)
        return True
