"""Countdown engine for Pomobar.

Modes
-----
WORK          Focus interval.
SHORT_BREAK   Short break.
LONG_BREAK    Long break.

Statuses
--------
IDLE          Full duration loaded, not counting down.
RUNNING       Counting down against a wall-clock anchor.
PAUSED        Countdown frozen at the last observed value.

Transitions
-----------
IDLE | PAUSED → RUNNING                 (start)
RUNNING → PAUSED                        (pause)
Any → IDLE                              (reset / set_mode)

Timekeeping
-----------
The remaining time is never decremented tick by tick.  ``start()`` captures
an anchor ``(now, remaining)`` and every ``observe()`` recomputes::

    remaining = max(0, anchor_remaining - (now - anchor_time))

so the polling cadence (and any throttling of it) has no effect on the
value, only on how often it is refreshed.

The engine never decides what happens after an interval ends.  ``poll()``
returns a :class:`Transition` once per call; the controller reacts to
``COMPLETED``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from PyQt6.QtCore import QObject, pyqtSignal

if TYPE_CHECKING:
    from ..settings import SettingsStore


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not TimerMode.WORK


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TransitionKind(Enum):
    NO_CHANGE = "no_change"
    TICKED = "ticked"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Transition:
    """What one poll of the engine observed."""

    kind: TransitionKind
    mode: TimerMode
    remaining: int
    episode: int

    @property
    def completed(self) -> bool:
        return self.kind is TransitionKind.COMPLETED


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_DURATIONS: dict[TimerMode, int] = {
    TimerMode.WORK: 25 * 60,
    TimerMode.SHORT_BREAK: 5 * 60,
    TimerMode.LONG_BREAK: 15 * 60,
}


def format_time(seconds: int) -> str:
    """Seconds as ``MM:SS`` (minutes zero-padded, may exceed 59)."""
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m:02d}:{s:02d}"


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Owns the timer mode, run status and remaining time.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted whenever the committed remaining time changes.
    state_changed(status: TimerStatus)
        Emitted on every status or mode change.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: SettingsStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._clock = clock

        self._mode: TimerMode = TimerMode.WORK
        self._status: TimerStatus = TimerStatus.IDLE
        self._duration: int = self.duration_for(TimerMode.WORK)
        self._remaining: int = self._duration

        # ── anchor (valid only while RUNNING) ─────────────────────────
        self._anchor_time: float | None = None
        self._anchor_remaining: int = self._remaining

        # ── completion gate ───────────────────────────────────────────
        self._episode: int = 0
        self._reported_episode: int | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def remaining(self) -> int:
        """Last committed remaining seconds (see ``observe()``)."""
        return self._remaining

    @property
    def duration(self) -> int:
        """Full length the current interval was loaded with, in seconds."""
        return self._duration

    @property
    def episode(self) -> int:
        """Number of ``start()`` calls that actually started the clock."""
        return self._episode

    @property
    def is_running(self) -> bool:
        return self._status is TimerStatus.RUNNING

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current interval."""
        if self._duration <= 0:
            return 0.0
        elapsed = self._duration - self._remaining
        return max(0.0, min(1.0, elapsed / self._duration))

    def duration_for(self, mode: TimerMode) -> int:
        """Configured length of *mode* in seconds, or the built-in default."""
        if self._settings is None:
            return DEFAULT_DURATIONS[mode]
        return self._settings.duration_seconds(mode)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start or resume counting down.  No-op while already running."""
        if self._status is TimerStatus.RUNNING:
            return
        self._anchor_time = self._clock()
        self._anchor_remaining = self._remaining
        self._episode += 1
        self._set_status(TimerStatus.RUNNING)

    def pause(self) -> None:
        """Freeze the countdown at its drift-corrected value."""
        if self._status is not TimerStatus.RUNNING:
            return
        self.observe()
        self._clear_anchor()
        self._set_status(TimerStatus.PAUSED)

    def reset(self) -> None:
        """Reload the full duration of the current mode and go IDLE."""
        self._load(self._mode)

    def set_mode(self, mode: TimerMode) -> None:
        """Switch to *mode*, abandoning any countdown in progress."""
        self._load(mode)

    def sync_with_settings(self) -> None:
        """Pick up edited durations, but only while IDLE.

        A running or paused countdown keeps its length.
        """
        if self._status is not TimerStatus.IDLE:
            return
        duration = self.duration_for(self._mode)
        self._duration = duration
        self._commit_remaining(duration)

    # ══════════════════════════════════════════════════════════════════
    #  CLOCK SAMPLING
    # ══════════════════════════════════════════════════════════════════

    def observe(self) -> int:
        """Recompute remaining time from the anchor while RUNNING."""
        if self._status is TimerStatus.RUNNING and self._anchor_time is not None:
            elapsed = max(0, int(self._clock() - self._anchor_time))
            self._commit_remaining(max(0, self._anchor_remaining - elapsed))
        return self._remaining

    def poll(self) -> Transition:
        """Observe once and describe what changed.

        ``COMPLETED`` is reported only on the transition into zero of a
        running episode; later polls at zero report ``NO_CHANGE``.
        """
        before = self._remaining
        remaining = self.observe()

        if (
            self._status is TimerStatus.RUNNING
            and remaining == 0
            and self._reported_episode != self._episode
        ):
            self._reported_episode = self._episode
            kind = TransitionKind.COMPLETED
        elif remaining != before:
            kind = TransitionKind.TICKED
        else:
            kind = TransitionKind.NO_CHANGE
        return Transition(kind, self._mode, remaining, self._episode)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _load(self, mode: TimerMode) -> None:
        self._mode = mode
        self._clear_anchor()
        self._duration = self.duration_for(mode)
        self._commit_remaining(self._duration)
        # Always emit so listeners pick up a new mode even if already IDLE.
        self._status = TimerStatus.IDLE
        self.state_changed.emit(TimerStatus.IDLE)

    def _clear_anchor(self) -> None:
        self._anchor_time = None
        self._anchor_remaining = self._remaining

    def _commit_remaining(self, value: int) -> None:
        if value != self._remaining:
            self._remaining = value
            self.tick.emit(value)

    def _set_status(self, status: TimerStatus) -> None:
        self._status = status
        self.state_changed.emit(status)
