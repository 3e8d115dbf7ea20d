"""
Study Session Tracker.

Two-state machine bounding a contiguous study interval:

    IDLE --start()--> ACTIVE --end()--> IDLE

While ACTIVE, every recorded answer bumps the running correct/incorrect
counter and adds the item to the set of distinct items touched. Closing a
session that touched at least one item yields a SessionRecord; an empty
session is discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from loguru import logger

from .models import ActiveSession, SessionRecord
from .utils import round_half_up, utc_today


class SessionStatus(Enum):
    """Session tracker state."""

    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class LiveSessionStats:
    """Running counters of the current session."""

    correct: int = 0
    incorrect: int = 0
    muscles_studied: int = 0


class SessionTracker:
    """Tracks the single active study session."""

    def __init__(self):
        self._active: ActiveSession | None = None

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.ACTIVE if self._active else SessionStatus.IDLE

    @property
    def is_active(self) -> bool:
        return self._active is not None

    def start(self, now: datetime) -> None:
        """
        Start a new session.

        Starting while already active discards the running counters of the
        previous session without producing a record.
        """
        if self._active is not None:
            logger.debug(
                f"Restarting session: discarding {len(self._active.muscles_studied)} "
                f"touched item(s) from session started at {self._active.started_at}"
            )
        self._active = ActiveSession(started_at=now)
        logger.debug(f"Study session started at {now.isoformat()}")

    def record(self, item_id: str, correct: bool) -> None:
        """Count one answer towards the active session."""
        if self._active is None:
            logger.debug(f"Answer for {item_id} recorded outside a session")
            return

        if correct:
            self._active.correct += 1
        else:
            self._active.incorrect += 1
        self._active.muscles_studied.add(item_id)

    def end(self, now: datetime) -> SessionRecord | None:
        """
        Close the active session.

        Returns:
            SessionRecord, or None when idle or when nothing was answered
        """
        active = self._active
        self._active = None

        if active is None:
            return None

        if not active.muscles_studied:
            logger.debug("Study session ended without answers; discarded")
            return None

        elapsed = (now - active.started_at).total_seconds()
        record = SessionRecord(
            date=utc_today(now),
            correct_count=active.correct,
            incorrect_count=active.incorrect,
            muscles_studied=len(active.muscles_studied),
            duration=max(0, round_half_up(elapsed)),
        )

        logger.debug(
            f"Study session ended: {record.muscles_studied} item(s), "
            f"{record.correct_count} correct, {record.incorrect_count} incorrect, "
            f"{record.duration}s"
        )
        return record

    def live_stats(self) -> LiveSessionStats:
        if self._active is None:
            return LiveSessionStats()
        return LiveSessionStats(
            correct=self._active.correct,
            incorrect=self._active.incorrect,
            muscles_studied=len(self._active.muscles_studied),
        )
