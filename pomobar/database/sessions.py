"""Recording finished intervals and querying the history.

``save_session`` is the persistence collaborator used by the timer
controller.  It never raises for database trouble: a failed write is
logged and reported as ``False`` so the timer can move on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .db import get_session
from .models import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSummary:
    work_sessions: int
    focus_minutes: int
    total_minutes: int


def save_session(
    mode: str,
    duration_seconds: int,
    completed_at: datetime | None = None,
) -> bool:
    """Insert one completed interval.  Returns False if the write failed."""
    record = Session(
        mode=mode,
        duration_seconds=int(duration_seconds),
        completed_at=completed_at or datetime.now(),
        completed=True,
    )
    try:
        with get_session() as db:
            db.add(record)
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(
            "Failed to save %s session (%ss): %s", mode, duration_seconds, exc,
        )
        return False
    logger.info("Saved %s session (%ss)", mode, duration_seconds)
    return True


# ── history queries ───────────────────────────────────────────────────────


def sessions_since(start: datetime) -> list[Session]:
    """All recorded intervals completed at or after *start*, newest first."""
    with get_session() as db:
        stmt = (
            select(Session)
            .where(Session.completed_at >= start)
            .order_by(Session.completed_at.desc(), Session.id.desc())
        )
        return list(db.scalars(stmt))


def today_sessions(now: datetime | None = None) -> list[Session]:
    now = now or datetime.now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return sessions_since(midnight)


def week_sessions(now: datetime | None = None) -> list[Session]:
    """Rolling last 7 days."""
    return sessions_since((now or datetime.now()) - timedelta(days=7))


def month_sessions(now: datetime | None = None) -> list[Session]:
    """Rolling last 30 days."""
    return sessions_since((now or datetime.now()) - timedelta(days=30))


def year_sessions(now: datetime | None = None) -> list[Session]:
    """Rolling last 365 days."""
    return sessions_since((now or datetime.now()) - timedelta(days=365))


def total_session_duration() -> int:
    """Sum of ``duration_seconds`` over every recorded interval."""
    with get_session() as db:
        total = db.scalar(select(func.sum(Session.duration_seconds)))
    return int(total or 0)


def total_completed_sessions() -> int:
    with get_session() as db:
        count = db.scalar(
            select(func.count(Session.id)).where(Session.completed == True)  # noqa: E712
        )
    return int(count or 0)


def summarize(sessions: Iterable[Session]) -> SessionSummary:
    """Completed work count, focus minutes and total minutes."""
    work = 0
    focus_seconds = 0
    total_seconds = 0
    for s in sessions:
        total_seconds += s.duration_seconds or 0
        if s.mode == "work" and s.completed:
            work += 1
            focus_seconds += s.duration_seconds or 0
    return SessionSummary(
        work_sessions=work,
        focus_minutes=focus_seconds // 60,
        total_minutes=total_seconds // 60,
    )
