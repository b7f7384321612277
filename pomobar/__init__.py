"""Pomobar — a menu bar Pomodoro timer."""

__version__ = "0.1.0"
