"""Database package."""

from .db import get_session, init_db, configure_engine, dispose_engine
from .models import Session
from .sessions import (
    SessionSummary,
    save_session,
    sessions_since,
    today_sessions,
    week_sessions,
    month_sessions,
    year_sessions,
    total_session_duration,
    total_completed_sessions,
    summarize,
)

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "dispose_engine",
    "Session",
    "SessionSummary",
    "save_session",
    "sessions_since",
    "today_sessions",
    "week_sessions",
    "month_sessions",
    "year_sessions",
    "total_session_duration",
    "total_completed_sessions",
    "summarize",
]
