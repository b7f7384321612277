"""UI package."""

from .timer_widget import TimerWidget
from .stats_widget import StatsWidget
from .settings_dialog import SettingsDialog
from .tray import TrayDisplay, make_tray_icon

__all__ = [
    "TimerWidget",
    "StatsWidget",
    "SettingsDialog",
    "TrayDisplay",
    "make_tray_icon",
]
