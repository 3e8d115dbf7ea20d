"""
Progress data model.

Persisted values serialize to the camelCase JSON layout used by the
browser version of the study app, so an exported progress blob loads
unchanged:

    {
        "muscles": {"Biceps brachii": {...}},
        "sessions": [{...}],
        "totalCorrect": 12,
        "totalIncorrect": 3,
        "streakDays": 2,
        "lastStudyDate": "2025-03-02",
        "startDate": "2025-02-20"
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .utils import format_date, parse_date

DEFAULT_EASE_FACTOR = 2.5


@dataclass
class ItemProgress:
    """Scheduling state and tallies for one study item."""

    item_id: str
    correct_count: int = 0
    incorrect_count: int = 0
    last_reviewed: date | None = None
    next_review_date: date | None = None
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0  # Days until next review
    repetitions: int = 0  # Consecutive qualifying reviews

    @property
    def total_answers(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def accuracy(self) -> float:
        """Fraction of correct answers (0.0 when never answered)."""
        if self.total_answers == 0:
            return 0.0
        return self.correct_count / self.total_answers

    def is_due(self, today: date) -> bool:
        """Check if this item is due for review."""
        if self.next_review_date is None:
            return True  # Never reviewed = due
        return self.next_review_date <= today

    def to_dict(self) -> dict[str, Any]:
        return {
            "muscleName": self.item_id,
            "correctCount": self.correct_count,
            "incorrectCount": self.incorrect_count,
            "lastReviewed": format_date(self.last_reviewed),
            "nextReviewDate": format_date(self.next_review_date),
            "easeFactor": self.ease_factor,
            "interval": self.interval,
            "repetitions": self.repetitions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], item_id: str | None = None) -> ItemProgress:
        return cls(
            item_id=item_id if item_id is not None else data["muscleName"],
            correct_count=int(data.get("correctCount", 0)),
            incorrect_count=int(data.get("incorrectCount", 0)),
            last_reviewed=parse_date(data.get("lastReviewed")),
            next_review_date=parse_date(data.get("nextReviewDate")),
            ease_factor=float(data.get("easeFactor", DEFAULT_EASE_FACTOR)),
            interval=int(data.get("interval", 0)),
            repetitions=int(data.get("repetitions", 0)),
        )


@dataclass(frozen=True)
class SessionRecord:
    """A closed study session summary. Append-only."""

    date: date
    correct_count: int
    incorrect_count: int
    muscles_studied: int  # Distinct items answered
    duration: int  # Seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "correctCount": self.correct_count,
            "incorrectCount": self.incorrect_count,
            "musclesStudied": self.muscles_studied,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionRecord:
        return cls(
            date=parse_date(data["date"]),
            correct_count=int(data.get("correctCount", 0)),
            incorrect_count=int(data.get("incorrectCount", 0)),
            muscles_studied=int(data.get("musclesStudied", 0)),
            duration=int(data.get("duration", 0)),
        )


@dataclass
class ProgressState:
    """Everything that is persisted about the learner's progress."""

    start_date: date
    muscles: dict[str, ItemProgress] = field(default_factory=dict)
    sessions: list[SessionRecord] = field(default_factory=list)
    total_correct: int = 0
    total_incorrect: int = 0
    streak_days: int = 0
    last_study_date: date | None = None

    @classmethod
    def default(cls, today: date) -> ProgressState:
        """Empty state for a first-time learner."""
        return cls(start_date=today)

    def to_dict(self) -> dict[str, Any]:
        return {
            "muscles": {name: p.to_dict() for name, p in self.muscles.items()},
            "sessions": [s.to_dict() for s in self.sessions],
            "totalCorrect": self.total_correct,
            "totalIncorrect": self.total_incorrect,
            "streakDays": self.streak_days,
            "lastStudyDate": format_date(self.last_study_date),
            "startDate": self.start_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], today: date) -> ProgressState:
        """
        Build state from persisted JSON.

        Missing keys fall back to defaults; wrongly typed values raise
        (KeyError, TypeError, ValueError, AttributeError) so the caller can
        discard the blob as a whole.
        """
        muscles = {
            name: ItemProgress.from_dict(raw, item_id=name)
            for name, raw in data.get("muscles", {}).items()
        }
        sessions = [SessionRecord.from_dict(raw) for raw in data.get("sessions", [])]
        start_date = parse_date(data.get("startDate")) or today

        return cls(
            start_date=start_date,
            muscles=muscles,
            sessions=sessions,
            total_correct=int(data.get("totalCorrect", 0)),
            total_incorrect=int(data.get("totalIncorrect", 0)),
            streak_days=int(data.get("streakDays", 0)),
            last_study_date=parse_date(data.get("lastStudyDate")),
        )


@dataclass
class ActiveSession:
    """Live counters of the session in progress. Never persisted."""

    started_at: datetime
    correct: int = 0
    incorrect: int = 0
    muscles_studied: set[str] = field(default_factory=set)
