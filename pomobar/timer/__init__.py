"""Timer package."""

from .engine import (
    TimerEngine,
    TimerMode,
    TimerStatus,
    Transition,
    TransitionKind,
    DEFAULT_DURATIONS,
    format_time,
)
from .controller import (
    TimerController,
    POLL_INTERVAL_MS,
    next_mode_after,
    choose_break_mode,
)

__all__ = [
    "TimerEngine",
    "TimerMode",
    "TimerStatus",
    "Transition",
    "TransitionKind",
    "DEFAULT_DURATIONS",
    "format_time",
    "TimerController",
    "POLL_INTERVAL_MS",
    "next_mode_after",
    "choose_break_mode",
]
