"""SQLAlchemy ORM models for Pomobar."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Session(Base):
    """One finished interval (work or break)."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mode = Column(String(20), nullable=False, default="work")  # work | short_break | long_break
    duration_seconds = Column(Integer, nullable=False, default=0)
    completed_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    completed = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return (
            f"<Session id={self.id} mode={self.mode} "
            f"duration={self.duration_seconds}s completed={self.completed}>"
        )
