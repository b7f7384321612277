"""Shared test helpers for Pomobar."""

from datetime import datetime

from pomobar.timer.controller import TimerController
from pomobar.timer.engine import TimerMode


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Wall clock that only moves when told to.

    Time is kept in whole microseconds so repeated small steps add up exactly.
    """

    def __init__(self, start: float = 1_700_000_000.0):
        self._start = start
        self._micros = 0

    def __call__(self) -> float:
        return self.now

    @property
    def now(self) -> float:
        return self._start + self._micros / 1_000_000

    def advance(self, seconds: float) -> None:
        self._micros += round(seconds * 1_000_000)


class FakeSounds:
    def __init__(self):
        self.played: list[str] = []

    def play_completion_sound(self, kind: str) -> bool:
        self.played.append(kind)
        return True


class FakeNotifier:
    def __init__(self, granted: bool = True):
        self.granted = granted
        self.notified: list[TimerMode] = []

    def notify(self, mode: TimerMode) -> bool:
        self.notified.append(mode)
        return self.granted


class FakeRecorder:
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.calls: list[tuple[str, int, datetime]] = []

    def __call__(self, mode: str, duration_seconds: int, completed_at: datetime) -> bool:
        self.calls.append((mode, duration_seconds, completed_at))
        return self.succeed


def run_for(controller: TimerController, clock: FakeClock, seconds: float, step: float = 0.1) -> None:
    """Drive the controller's poll loop by hand while time passes."""
    steps = int(round(seconds / step))
    for _ in range(steps):
        clock.advance(step)
        controller._on_poll()


def finish_interval(controller: TimerController, clock: FakeClock) -> None:
    """Jump to the end of the running interval and poll once."""
    clock.advance(controller.engine.remaining)
    controller._on_poll()
