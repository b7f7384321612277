"""Tests for the countdown engine — drift-corrected timekeeping and the
completion gate."""

import pytest

from pomobar.settings import Settings, SettingsStore
from pomobar.timer.engine import (
    DEFAULT_DURATIONS,
    TimerEngine,
    TimerMode,
    TimerStatus,
    TransitionKind,
    format_time,
)

from helpers import FakeClock, SignalCollector


# ═══════════════════════════════════════════════════════════════════════════
#  Initial state
# ═══════════════════════════════════════════════════════════════════════════


class TestInitialState:
    def test_starts_idle_in_work(self, engine):
        assert engine.mode is TimerMode.WORK
        assert engine.status is TimerStatus.IDLE
        assert engine.remaining == 25 * 60
        assert engine.duration == 25 * 60
        assert engine.episode == 0

    def test_defaults_without_settings(self, qapp, clock):
        e = TimerEngine(clock=clock)
        for mode, seconds in DEFAULT_DURATIONS.items():
            assert e.duration_for(mode) == seconds

    def test_unloaded_store_gives_defaults(self, qapp, clock):
        store = SettingsStore(autosave=False)
        store.settings.work_minutes = 50
        e = TimerEngine(settings=store, clock=clock)
        assert e.remaining == 25 * 60

    def test_percent_complete_zero_when_idle(self, engine):
        assert engine.percent_complete == 0.0


# ═══════════════════════════════════════════════════════════════════════════
#  Drift-corrected countdown
# ═══════════════════════════════════════════════════════════════════════════


class TestCountdown:
    def test_start_sets_running(self, engine):
        engine.start()
        assert engine.status is TimerStatus.RUNNING
        assert engine.is_running
        assert engine.episode == 1

    def test_start_while_running_is_noop(self, engine, clock):
        engine.start()
        clock.advance(10)
        engine.start()
        assert engine.episode == 1
        assert engine.observe() == 1490

    @pytest.mark.parametrize("step", [0.1, 0.25, 0.5, 1.0, 47.0])
    def test_elapsed_time_independent_of_cadence(self, engine, clock, step):
        engine.start()
        for _ in range(round(47.0 / step)):
            clock.advance(step)
            engine.observe()
        assert engine.remaining == 1453

    def test_irregular_polling(self, engine, clock):
        engine.start()
        for gap in (0.1, 0.1, 5.0, 0.3, 30.0, 11.5):
            clock.advance(gap)
            engine.observe()
        assert engine.remaining == 1453

    def test_no_observation_means_no_change(self, engine, clock):
        engine.start()
        clock.advance(100)
        assert engine.remaining == 1500
        assert engine.observe() == 1400

    def test_partial_seconds_are_floored(self, engine, clock):
        engine.start()
        clock.advance(0.9)
        assert engine.observe() == 1500
        clock.advance(0.2)
        assert engine.observe() == 1499

    def test_never_negative(self, engine, clock):
        engine.start()
        clock.advance(10_000)
        assert engine.observe() == 0

    def test_clock_moving_backwards(self, engine, clock):
        engine.start()
        clock.advance(-30)
        assert engine.observe() == 1500

    def test_observe_when_idle_returns_stored(self, engine, clock):
        clock.advance(50)
        assert engine.observe() == 1500

    def test_percent_complete(self, engine, clock):
        engine.start()
        clock.advance(750)
        engine.observe()
        assert engine.percent_complete == pytest.approx(0.5)


# ═══════════════════════════════════════════════════════════════════════════
#  Pause / resume / reset
# ═══════════════════════════════════════════════════════════════════════════


class TestPauseResume:
    def test_pause_freezes_remaining(self, engine, clock):
        engine.start()
        clock.advance(10)
        engine.pause()
        assert engine.status is TimerStatus.PAUSED
        assert engine.remaining == 1490
        clock.advance(500)
        assert engine.observe() == 1490

    def test_resume_continues_from_paused_value(self, engine, clock):
        engine.start()
        clock.advance(10)
        engine.pause()
        clock.advance(300)
        engine.start()
        clock.advance(5)
        assert engine.observe() == 1485
        assert engine.episode == 2

    def test_pause_when_idle_is_noop(self, engine):
        engine.pause()
        assert engine.status is TimerStatus.IDLE

    def test_double_pause(self, engine, clock):
        engine.start()
        clock.advance(3)
        engine.pause()
        clock.advance(3)
        engine.pause()
        assert engine.remaining == 1497

    def test_reset_from_running(self, engine, clock):
        engine.start()
        clock.advance(100)
        engine.observe()
        engine.reset()
        assert engine.status is TimerStatus.IDLE
        assert engine.remaining == 1500
        clock.advance(100)
        assert engine.observe() == 1500

    def test_reset_from_paused(self, engine, clock):
        engine.start()
        clock.advance(60)
        engine.pause()
        engine.reset()
        assert engine.status is TimerStatus.IDLE
        assert engine.remaining == 1500


# ═══════════════════════════════════════════════════════════════════════════
#  Modes and settings
# ═══════════════════════════════════════════════════════════════════════════


class TestModes:
    @pytest.mark.parametrize("mode, seconds", [
        (TimerMode.WORK, 1500),
        (TimerMode.SHORT_BREAK, 300),
        (TimerMode.LONG_BREAK, 900),
    ])
    def test_set_mode_loads_full_duration(self, engine, mode, seconds):
        engine.set_mode(mode)
        assert engine.mode is mode
        assert engine.status is TimerStatus.IDLE
        assert engine.remaining == seconds
        assert engine.duration == seconds

    def test_set_mode_abandons_countdown(self, engine, clock):
        engine.start()
        clock.advance(42)
        engine.observe()
        engine.set_mode(TimerMode.SHORT_BREAK)
        assert engine.status is TimerStatus.IDLE
        assert engine.remaining == 300

    def test_set_mode_emits_state_even_when_idle(self, engine):
        states = SignalCollector()
        engine.state_changed.connect(states.slot)
        engine.set_mode(TimerMode.LONG_BREAK)
        assert states.items == [TimerStatus.IDLE]

    def test_custom_durations(self, qapp, clock):
        store = SettingsStore(Settings(work_minutes=50, short_break_minutes=10))
        e = TimerEngine(settings=store, clock=clock)
        assert e.remaining == 3000
        e.set_mode(TimerMode.SHORT_BREAK)
        assert e.remaining == 600

    def test_mode_is_break(self):
        assert not TimerMode.WORK.is_break
        assert TimerMode.SHORT_BREAK.is_break
        assert TimerMode.LONG_BREAK.is_break


class TestSyncWithSettings:
    def test_idle_picks_up_new_duration(self, engine, store):
        store.set_duration(TimerMode.WORK, 30)
        engine.sync_with_settings()
        assert engine.remaining == 1800
        assert engine.duration == 1800

    def test_running_is_untouched(self, engine, store, clock):
        engine.start()
        clock.advance(20)
        engine.observe()
        store.set_duration(TimerMode.WORK, 30)
        engine.sync_with_settings()
        assert engine.remaining == 1480
        assert engine.duration == 1500
        clock.advance(10)
        assert engine.observe() == 1470

    def test_paused_is_untouched(self, engine, store, clock):
        engine.start()
        clock.advance(20)
        engine.pause()
        store.set_duration(TimerMode.WORK, 45)
        engine.sync_with_settings()
        assert engine.remaining == 1480
        assert engine.status is TimerStatus.PAUSED

    def test_reset_after_edit_uses_new_length(self, engine, store, clock):
        engine.start()
        store.set_duration(TimerMode.WORK, 40)
        engine.sync_with_settings()
        engine.reset()
        assert engine.remaining == 2400


# ═══════════════════════════════════════════════════════════════════════════
#  poll() and the completion gate
# ═══════════════════════════════════════════════════════════════════════════


class TestPoll:
    def test_no_change_when_idle(self, engine):
        t = engine.poll()
        assert t.kind is TransitionKind.NO_CHANGE
        assert t.mode is TimerMode.WORK
        assert t.remaining == 1500

    def test_ticked_when_remaining_changes(self, engine, clock):
        engine.start()
        clock.advance(1)
        t = engine.poll()
        assert t.kind is TransitionKind.TICKED
        assert t.remaining == 1499
        assert t.episode == 1

    def test_completed_exactly_once(self, engine, clock):
        engine.start()
        clock.advance(1500)
        kinds = []
        for _ in range(50):
            kinds.append(engine.poll().kind)
            clock.advance(0.1)
        assert kinds.count(TransitionKind.COMPLETED) == 1
        assert kinds[0] is TransitionKind.COMPLETED

    def test_completed_carries_mode_and_episode(self, engine, clock):
        engine.set_mode(TimerMode.SHORT_BREAK)
        engine.start()
        clock.advance(301)
        t = engine.poll()
        assert t.completed
        assert t.mode is TimerMode.SHORT_BREAK
        assert t.remaining == 0
        assert t.episode == engine.episode

    def test_paused_at_zero_then_resumed_reports_again(self, engine, clock):
        engine.start()
        clock.advance(1500)
        engine.pause()
        assert engine.remaining == 0
        engine.start()
        assert engine.poll().completed

    def test_new_episode_completes_again(self, engine, clock):
        engine.set_mode(TimerMode.SHORT_BREAK)
        engine.start()
        clock.advance(300)
        assert engine.poll().completed
        engine.set_mode(TimerMode.SHORT_BREAK)
        engine.start()
        clock.advance(300)
        assert engine.poll().completed


# ═══════════════════════════════════════════════════════════════════════════
#  Signals
# ═══════════════════════════════════════════════════════════════════════════


class TestSignals:
    def test_tick_emitted_on_change_only(self, engine, clock):
        ticks = SignalCollector()
        engine.tick.connect(ticks.slot)
        engine.start()
        clock.advance(0.5)
        engine.observe()
        assert len(ticks) == 0
        clock.advance(0.5)
        engine.observe()
        assert ticks.items == [1499]

    def test_state_changes(self, engine, clock):
        states = SignalCollector()
        engine.state_changed.connect(states.slot)
        engine.start()
        engine.pause()
        engine.reset()
        assert states.items == [TimerStatus.RUNNING, TimerStatus.PAUSED, TimerStatus.IDLE]


class TestFormatTime:
    @pytest.mark.parametrize("seconds, text", [
        (1500, "25:00"),
        (1453, "24:13"),
        (59, "00:59"),
        (0, "00:00"),
        (3600, "60:00"),
        (-5, "00:00"),
    ])
    def test_format(self, seconds, text):
        assert format_time(seconds) == text
