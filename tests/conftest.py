"""Shared pytest fixtures for Pomobar tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from pomobar.database.db import configure_engine, init_db
from pomobar.settings import Settings, SettingsStore
from pomobar.timer.controller import TimerController
from pomobar.timer.engine import TimerEngine

from helpers import FakeClock, FakeNotifier, FakeRecorder, FakeSounds


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture(autouse=True)
def settings_path(tmp_path, monkeypatch):
    """Keep settings writes inside the test's temp directory."""
    path = tmp_path / "settings.json"
    monkeypatch.setattr("pomobar.settings.SETTINGS_PATH", path)
    monkeypatch.setattr("pomobar.settings.APP_SUPPORT_DIR", tmp_path)
    return path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    """Loaded store with the stock 25 / 5 / 15 durations."""
    return SettingsStore(Settings())


@pytest.fixture
def engine(qapp, store, clock):
    return TimerEngine(parent=None, settings=store, clock=clock)


@pytest.fixture
def sounds():
    return FakeSounds()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def recorder():
    return FakeRecorder()


@pytest.fixture
def controller(engine, store, sounds, notifier, recorder):
    """Controller with recording fakes for every collaborator."""
    return TimerController(
        engine, store, None,
        sounds=sounds, notifier=notifier, recorder=recorder,
    )
