"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Pomobar/settings.json

Usage::

    store = SettingsStore()
    store.load()
    store.set_duration(TimerMode.WORK, 30)
    engine.sync_with_settings()
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.engine import DEFAULT_DURATIONS, TimerMode

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomobar"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

# Upper bound in minutes per mode; the lower bound is always 1.
DURATION_LIMITS: dict[TimerMode, int] = {
    TimerMode.WORK: 60,
    TimerMode.SHORT_BREAK: 30,
    TimerMode.LONG_BREAK: 60,
}

LONG_BREAK_INTERVAL = 4

_MINUTES_FIELD: dict[TimerMode, str] = {
    TimerMode.WORK: "work_minutes",
    TimerMode.SHORT_BREAK: "short_break_minutes",
    TimerMode.LONG_BREAK: "long_break_minutes",
}


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_minutes: int = DEFAULT_DURATIONS[TimerMode.WORK] // 60
    short_break_minutes: int = DEFAULT_DURATIONS[TimerMode.SHORT_BREAK] // 60
    long_break_minutes: int = DEFAULT_DURATIONS[TimerMode.LONG_BREAK] // 60
    long_break_interval: int = LONG_BREAK_INTERVAL
    work_session_count: int = 0
    auto_start_breaks: bool = False
    auto_start_work: bool = True

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    hide_on_blur: bool = True


def clamp_minutes(mode: TimerMode, value: object) -> int | None:
    """Coerce *value* to a whole number of minutes within *mode*'s bounds.

    Returns ``None`` for input that is not a number at all.
    """
    if isinstance(value, bool):
        return None
    try:
        minutes = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return max(1, min(DURATION_LIMITS[mode], minutes))


def _as_int(value: object, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Could not read settings from %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )


class SettingsStore:
    """Owns the live :class:`Settings` and the rules for editing them.

    The timer engine reads durations through ``duration_seconds()``.  Edits
    never notify the engine; callers follow an edit with
    ``engine.sync_with_settings()``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        autosave: bool = True,
    ) -> None:
        self._settings = settings if settings is not None else Settings()
        self._loaded = settings is not None
        self._autosave = autosave

    # ── lifecycle ─────────────────────────────────────────────────────

    def load(self) -> None:
        self._settings = load_settings()
        self._loaded = True
        logger.info("Settings loaded: %s", self.get_durations_label())

    def save(self) -> bool:
        """Persist to disk.  Failures are logged, never raised."""
        try:
            save_settings(self._settings)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)
            return False
        return True

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def settings(self) -> Settings:
        return self._settings

    # ── durations ─────────────────────────────────────────────────────

    def get_durations(self) -> dict[TimerMode, int]:
        """Minutes per mode, always within bounds."""
        result: dict[TimerMode, int] = {}
        for mode, name in _MINUTES_FIELD.items():
            default = DEFAULT_DURATIONS[mode] // 60
            if not self._loaded:
                result[mode] = default
                continue
            minutes = clamp_minutes(mode, getattr(self._settings, name))
            result[mode] = default if minutes is None else minutes
        return result

    def get_durations_label(self) -> str:
        d = self.get_durations()
        return (
            f"work={d[TimerMode.WORK]}m "
            f"short={d[TimerMode.SHORT_BREAK]}m "
            f"long={d[TimerMode.LONG_BREAK]}m"
        )

    def duration_seconds(self, mode: TimerMode) -> int:
        return self.get_durations()[mode] * 60

    def set_duration(self, mode: TimerMode, value: object) -> bool:
        """Set *mode*'s length in minutes.

        Non-numeric input is rejected (returns False); out-of-range input is
        clamped to the nearest bound.
        """
        minutes = clamp_minutes(mode, value)
        if minutes is None:
            logger.info("Ignoring non-numeric %s duration: %r", mode.value, value)
            return False
        setattr(self._settings, _MINUTES_FIELD[mode], minutes)
        self._loaded = True
        self._changed()
        return True

    def reset_to_defaults(self) -> None:
        """Restore the default durations (other preferences are kept)."""
        for mode, name in _MINUTES_FIELD.items():
            setattr(self._settings, name, DEFAULT_DURATIONS[mode] // 60)
        self._loaded = True
        self._changed()

    # ── work session count ────────────────────────────────────────────

    @property
    def work_session_count(self) -> int:
        return max(0, _as_int(self._settings.work_session_count, 0))

    @property
    def long_break_interval(self) -> int:
        return max(1, _as_int(self._settings.long_break_interval, LONG_BREAK_INTERVAL))

    def increment_work_session_count(self) -> int:
        self._settings.work_session_count = self.work_session_count + 1
        self._changed()
        return self._settings.work_session_count

    def reset_work_session_count(self) -> None:
        self._settings.work_session_count = 0
        self._changed()

    # ── auto-start ────────────────────────────────────────────────────

    def auto_start_after(self, completed: TimerMode) -> bool:
        """Whether the interval following *completed* starts by itself."""
        if completed is TimerMode.WORK:
            return bool(self._settings.auto_start_breaks)
        return bool(self._settings.auto_start_work)

    def set_auto_start(self, *, breaks: bool, work: bool) -> None:
        self._settings.auto_start_breaks = breaks
        self._settings.auto_start_work = work
        self._changed()

    # ── audio / notifications ─────────────────────────────────────────

    @property
    def sound_enabled(self) -> bool:
        return bool(self._settings.sound_enabled)

    @property
    def sound_volume(self) -> int:
        return max(0, min(100, _as_int(self._settings.sound_volume, 70)))

    @property
    def notifications_enabled(self) -> bool:
        return bool(self._settings.notifications_enabled)

    def set_sound(self, *, enabled: bool, volume: int) -> None:
        self._settings.sound_enabled = enabled
        self._settings.sound_volume = max(0, min(100, int(volume)))
        self._changed()

    def set_notifications_enabled(self, enabled: bool) -> None:
        self._settings.notifications_enabled = enabled
        self._changed()

    @property
    def hide_on_blur(self) -> bool:
        return bool(self._settings.hide_on_blur)

    # ── internal ──────────────────────────────────────────────────────

    def _changed(self) -> None:
        if self._autosave:
            self.save()
