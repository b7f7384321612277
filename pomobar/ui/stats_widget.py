"""Stats panel — today's and this week's focus at a glance.

Sections
--------
1. **Today**, **Last 7 days**, **Last 30 days**, **Last year**: completed
   focus sessions and focus time over each rolling window
2. **All time**: every recorded interval and the total time logged
3. **Recent**: the five most recent intervals recorded today
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QFrame
from sqlalchemy.exc import SQLAlchemyError

from ..database.models import Session
from ..database.sessions import (
    month_sessions,
    summarize,
    today_sessions,
    total_completed_sessions,
    total_session_duration,
    week_sessions,
    year_sessions,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5

_MODE_NAMES = {
    "work": "Focus",
    "short_break": "Short break",
    "long_break": "Long break",
}


def _format_focus_hours(total_minutes: int) -> str:
    """125 → '2h 5m', 0 → '0m', 60 → '1h 0m'."""
    if total_minutes <= 0:
        return "0m"
    hours = total_minutes // 60
    mins = total_minutes % 60
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"


def _describe(session: Session) -> str:
    name = _MODE_NAMES.get(session.mode, session.mode)
    when = session.completed_at.strftime("%H:%M") if session.completed_at else "--:--"
    return f"{when}  {name}  {session.duration_seconds // 60} min"


class StatsWidget(QWidget):
    """Summary cards backed by the session history."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(10)

        cards = QGridLayout()
        cards.setSpacing(10)
        self._today_value, today_card = self._card("Today")
        self._week_value, week_card = self._card("Last 7 days")
        self._month_value, month_card = self._card("Last 30 days")
        self._year_value, year_card = self._card("Last year")
        cards.addWidget(today_card, 0, 0)
        cards.addWidget(week_card, 0, 1)
        cards.addWidget(month_card, 1, 0)
        cards.addWidget(year_card, 1, 1)
        layout.addLayout(cards)

        self._all_time_label = QLabel("")
        self._all_time_label.setObjectName("mutedLabel")
        layout.addWidget(self._all_time_label)

        header = QLabel("Recent")
        header.setObjectName("mutedLabel")
        layout.addWidget(header)

        self._recent_label = QLabel("")
        self._recent_label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self._recent_label.setWordWrap(True)
        layout.addWidget(self._recent_label)

        self._error_label = QLabel("")
        self._error_label.setObjectName("warningLabel")
        self._error_label.setVisible(False)
        layout.addWidget(self._error_label)

        layout.addStretch()

    def _card(self, title: str) -> tuple[QLabel, QFrame]:
        card = QFrame(self)
        card.setObjectName("card")
        v = QVBoxLayout(card)
        v.setContentsMargins(14, 10, 14, 10)
        caption = QLabel(title, card)
        caption.setObjectName("mutedLabel")
        value = QLabel("", card)
        value.setStyleSheet("font-size: 16px; font-weight: 700;")
        v.addWidget(caption)
        v.addWidget(value)
        return value, card

    # ── refresh ───────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Reload the summaries from the database."""
        try:
            today = today_sessions()
            windows = [
                (self._today_value, today),
                (self._week_value, week_sessions()),
                (self._month_value, month_sessions()),
                (self._year_value, year_sessions()),
            ]
            total_count = total_completed_sessions()
            total_seconds = total_session_duration()
        except SQLAlchemyError as exc:
            logger.warning("Could not load session history: %s", exc)
            self._error_label.setText("History is unavailable right now.")
            self._error_label.setVisible(True)
            return
        self._error_label.setVisible(False)

        for label, sessions in windows:
            s = summarize(sessions)
            label.setText(
                f"{s.work_sessions} sessions · {_format_focus_hours(s.focus_minutes)}"
            )
        self._all_time_label.setText(
            f"All time: {total_count} intervals · "
            f"{_format_focus_hours(total_seconds // 60)} logged"
        )
        if today:
            self._recent_label.setText(
                "\n".join(_describe(s) for s in today[:RECENT_LIMIT])
            )
        else:
            self._recent_label.setText("No sessions yet today.")

    # ── read-only accessors ───────────────────────────────────────────

    @property
    def today_text(self) -> str:
        return self._today_value.text()

    @property
    def week_text(self) -> str:
        return self._week_value.text()

    @property
    def month_text(self) -> str:
        return self._month_value.text()

    @property
    def year_text(self) -> str:
        return self._year_value.text()

    @property
    def all_time_text(self) -> str:
        return self._all_time_label.text()

    @property
    def recent_text(self) -> str:
        return self._recent_label.text()
