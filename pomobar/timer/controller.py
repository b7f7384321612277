"""Completion handling and auto-start sequencing.

The controller drives the engine with a 100 ms polling ``QTimer`` and is
the single entry point for user commands, so every mutation of the timer
happens on the Qt event loop, one at a time.

When a poll reports ``COMPLETED`` the controller, exactly once per
episode:

1. plays the completion sound and posts a notification,
2. records the finished interval (a failed write is logged and surfaced
   through ``persistence_failed``, the timer carries on regardless),
3. bumps the work session count after a work interval and clears it
   after a long break,
4. switches the engine to the next mode,
5. optionally leaves an *auto-start intent* for that mode.

The intent is honoured on a later poll, and only if the engine is still
IDLE in the intended mode.  Any user command clears it, so a pause or reset
issued in between is never overridden.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..database.sessions import save_session
from .engine import (
    TimerEngine,
    TimerMode,
    TimerStatus,
    Transition,
    format_time,
)

if TYPE_CHECKING:
    from ..settings import SettingsStore

logger = logging.getLogger(__name__)


POLL_INTERVAL_MS = 100


class SoundPlayer(Protocol):
    def play_completion_sound(self, kind: str) -> bool: ...


class SessionNotifier(Protocol):
    def notify(self, mode: TimerMode) -> bool: ...


Recorder = Callable[[str, int, datetime], bool]


# ── policy ────────────────────────────────────────────────────────────────


def next_mode_after(mode: TimerMode) -> TimerMode:
    """Mode that follows a naturally completed interval."""
    if mode is TimerMode.WORK:
        return TimerMode.SHORT_BREAK
    return TimerMode.WORK


def choose_break_mode(work_session_count: int, long_break_interval: int = 4) -> TimerMode:
    """Break picked by the manual "take a break" shortcut."""
    if work_session_count >= long_break_interval:
        return TimerMode.LONG_BREAK
    return TimerMode.SHORT_BREAK


# ── controller ────────────────────────────────────────────────────────────


class TimerController(QObject):
    """Polls the engine and reacts to finished intervals.

    Signals
    -------
    session_completed(data: dict)
        Emitted after the completion side effects ran.  Keys: ``mode``,
        ``duration_seconds``, ``completed_at``, ``saved``, ``next_mode``,
        ``auto_start``.
    persistence_failed(message: str)
        The finished interval could not be recorded.
    display_changed(text: str)
        ``MM:SS`` whenever the remaining time shown to the user changes.
    """

    session_completed = pyqtSignal(object)
    persistence_failed = pyqtSignal(str)
    display_changed = pyqtSignal(str)

    def __init__(
        self,
        engine: TimerEngine,
        settings: SettingsStore,
        parent: QObject | None = None,
        *,
        sounds: SoundPlayer | None = None,
        notifier: SessionNotifier | None = None,
        recorder: Recorder = save_session,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._settings = settings
        self._sounds = sounds
        self._notifier = notifier
        self._recorder = recorder
        self._now = now

        self._auto_start_mode: TimerMode | None = None
        self._handled_episode: int | None = None
        self._last_display: str = ""

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(POLL_INTERVAL_MS)
        self._poll_timer.timeout.connect(self._on_poll)

        engine.tick.connect(self._on_engine_tick)
        engine.state_changed.connect(self._on_engine_state)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def auto_start_pending(self) -> bool:
        return self._auto_start_mode is not None

    @property
    def is_active(self) -> bool:
        return self._poll_timer.isActive()

    @property
    def display_text(self) -> str:
        return format_time(self._engine.remaining)

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def activate(self) -> None:
        """Start polling and publish the current display."""
        self._poll_timer.start()
        self._publish_display()

    def shutdown(self) -> None:
        self._poll_timer.stop()
        self._cancel_auto_start()

    # ══════════════════════════════════════════════════════════════════
    #  USER COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        self._cancel_auto_start()
        self._engine.start()

    def pause(self) -> None:
        """Pause, unless the interval already ran out since the last poll.

        In that case the completion is handled instead and the next
        interval is left IDLE.
        """
        self._cancel_auto_start()
        transition = self._engine.poll()
        if transition.completed:
            self.handle_completion(transition)
            self._cancel_auto_start()
            return
        self._engine.pause()

    def toggle(self) -> None:
        """Start/resume when stopped, pause when running."""
        if self._engine.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._cancel_auto_start()
        self._engine.reset()

    def set_mode(self, mode: TimerMode) -> None:
        self._cancel_auto_start()
        self._engine.set_mode(mode)

    def start_break(self) -> TimerMode:
        """Switch to the break the work session count calls for and start it.

        A long break consumes the count.
        """
        self._cancel_auto_start()
        mode = choose_break_mode(
            self._settings.work_session_count,
            self._settings.long_break_interval,
        )
        if mode is TimerMode.LONG_BREAK:
            self._settings.reset_work_session_count()
        self._engine.set_mode(mode)
        self._request_auto_start(mode)
        return mode

    def set_notifier(self, notifier: SessionNotifier | None) -> None:
        """Attach the notifier once the tray it posts through exists."""
        self._notifier = notifier

    def sync_with_settings(self) -> None:
        """Call after every settings edit."""
        self._engine.sync_with_settings()

    # ══════════════════════════════════════════════════════════════════
    #  POLLING
    # ══════════════════════════════════════════════════════════════════

    def _on_poll(self) -> None:
        transition = self._engine.poll()
        if transition.completed:
            self.handle_completion(transition)
            return
        self._apply_pending_auto_start()

    def handle_completion(self, transition: Transition) -> bool:
        """Run the completion side effects once for *transition*'s episode.

        Returns False when this episode was already handled.
        """
        if transition.episode == self._handled_episode:
            return False
        self._handled_episode = transition.episode

        mode = transition.mode
        duration = self._engine.duration
        completed_at = self._now()
        logger.info("%s interval complete (%ss)", mode.value, duration)

        # ── sound + notification ──────────────────────────────────────
        if self._sounds is not None:
            self._sounds.play_completion_sound("break" if mode.is_break else "work")
        if self._notifier is not None:
            self._notifier.notify(mode)

        # ── persist ───────────────────────────────────────────────────
        saved = self._recorder(mode.value, duration, completed_at)
        if not saved:
            logger.warning("Session not recorded; continuing with the next interval")
            self.persistence_failed.emit("Couldn't save this session to history.")

        # ── work session count ────────────────────────────────────────
        if mode is TimerMode.WORK:
            self._settings.increment_work_session_count()
        elif mode is TimerMode.LONG_BREAK:
            self._settings.reset_work_session_count()

        # ── advance ───────────────────────────────────────────────────
        next_mode = next_mode_after(mode)
        self._engine.set_mode(next_mode)
        auto_start = self._settings.auto_start_after(mode)
        if auto_start:
            self._request_auto_start(next_mode)

        self.session_completed.emit({
            "mode": mode.value,
            "duration_seconds": duration,
            "completed_at": completed_at,
            "saved": saved,
            "next_mode": next_mode.value,
            "auto_start": auto_start,
        })
        return True

    # ══════════════════════════════════════════════════════════════════
    #  AUTO-START INTENT
    # ══════════════════════════════════════════════════════════════════

    def _request_auto_start(self, mode: TimerMode) -> None:
        self._auto_start_mode = mode

    def _cancel_auto_start(self) -> None:
        self._auto_start_mode = None

    def _apply_pending_auto_start(self) -> None:
        mode = self._auto_start_mode
        if mode is None:
            return
        self._auto_start_mode = None
        if self._engine.status is TimerStatus.IDLE and self._engine.mode is mode:
            logger.debug("Auto-starting %s", mode.value)
            self._engine.start()
        else:
            logger.debug("Dropping auto-start of %s; timer moved on", mode.value)

    # ══════════════════════════════════════════════════════════════════
    #  DISPLAY
    # ══════════════════════════════════════════════════════════════════

    def _on_engine_tick(self, _remaining: int) -> None:
        self._publish_display()

    def _on_engine_state(self, _status: TimerStatus) -> None:
        self._publish_display()

    def _publish_display(self) -> None:
        text = format_time(self._engine.remaining)
        if text != self._last_display:
            self._last_display = text
            self.display_changed.emit(text)
