"""SQLite engine and unit-of-work sessions for the session history.

The engine is created on first use, so importing the package never
touches the disk.  Tests swap in an in-memory database through
``configure_engine``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session as OrmSession, sessionmaker

from .models import Base

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomobar"
DB_PATH = APP_SUPPORT_DIR / "pomobar.db"

_engine: Engine | None = None
_factory: sessionmaker | None = None


def _build(url: str) -> Engine:
    # Qt timers and the app shell share the connection across threads.
    return create_engine(url, connect_args={"check_same_thread": False}, echo=False)


def _current_engine() -> Engine:
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = _build(f"sqlite:///{DB_PATH}")
        logger.debug("Opened session history at %s", DB_PATH)
    return _engine


def _session_factory() -> sessionmaker:
    global _factory
    if _factory is None:
        _factory = sessionmaker(bind=_current_engine(), expire_on_commit=False)
    return _factory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Use *url* instead of the database file under Application Support."""
    global _engine
    dispose_engine()
    _engine = _build(url)


def init_db() -> None:
    """Create any missing tables."""
    engine = _current_engine()
    Base.metadata.create_all(engine)
    logger.info("Session history ready at %s", engine.url)


def dispose_engine() -> None:
    """Release pooled connections; the next use reopens the default file."""
    global _engine, _factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _factory = None


@contextmanager
def get_session() -> Iterator[OrmSession]:
    """Commit when the block exits cleanly, roll back and re-raise otherwise."""
    session = _session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
