"""
Read-only views over ProgressState.

Provides:
- Due-for-review filtering
- Per-item mastery score (0-100) and level
- Aggregate statistics for dashboards
- Mastery distribution and needs-attention ranking over a catalog

Nothing here mutates state or caches results.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from .models import ItemProgress, ProgressState
from .utils import round_half_up

MASTERED_MIN_ANSWERS = 5
MASTERED_MIN_ACCURACY = 0.8


class MasteryLevel(str, Enum):
    """Mastery score buckets."""

    NEW = "new"  # 0-19
    BEGINNING = "beginning"  # 20-39
    AVERAGE = "average"  # 40-59
    GOOD = "good"  # 60-79
    MASTERED = "mastered"  # 80-100

    @classmethod
    def from_score(cls, score: int) -> MasteryLevel:
        if score >= 80:
            return cls.MASTERED
        elif score >= 60:
            return cls.GOOD
        elif score >= 40:
            return cls.AVERAGE
        elif score >= 20:
            return cls.BEGINNING
        else:
            return cls.NEW

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            MasteryLevel.NEW: "dim",
            MasteryLevel.BEGINNING: "red",
            MasteryLevel.AVERAGE: "yellow",
            MasteryLevel.GOOD: "cyan",
            MasteryLevel.MASTERED: "green",
        }[self]


@dataclass(frozen=True)
class StudyStatistics:
    """Aggregate progress statistics. Durations are in seconds."""

    total_answered: int
    total_correct: int
    total_incorrect: int
    accuracy: float  # Percent, one decimal
    streak_days: int
    sessions_count: int
    mastered_count: int
    needs_review_count: int
    muscles_studied: int
    total_study_time: int
    avg_session_duration: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAnswered": self.total_answered,
            "totalCorrect": self.total_correct,
            "totalIncorrect": self.total_incorrect,
            "accuracy": self.accuracy,
            "streakDays": self.streak_days,
            "sessionsCount": self.sessions_count,
            "masteredCount": self.mastered_count,
            "needsReviewCount": self.needs_review_count,
            "musclesStudied": self.muscles_studied,
            "totalStudyTime": self.total_study_time,
            "avgSessionDuration": self.avg_session_duration,
        }


# =============================================================================
# Per-item Queries
# =============================================================================


def due_for_review(state: ProgressState, item_ids: Iterable[str], today: date) -> list[str]:
    """
    Filter item ids down to those due today, preserving input order.

    Items without progress or without a next review date are due.
    """
    due = []
    for item_id in item_ids:
        progress = state.muscles.get(item_id)
        if progress is None or progress.is_due(today):
            due.append(item_id)
    return due


def mastery(state: ProgressState, item_id: str) -> int:
    """
    Mastery score for one item, 0-100.

    70% weight on historical accuracy plus up to 30 points for the current
    run of qualifying reviews (10 per repetition).
    """
    progress = state.muscles.get(item_id)
    if progress is None or progress.total_answers == 0:
        return 0

    repetition_bonus = min(progress.repetitions * 10, 30)
    return min(100, round_half_up(progress.accuracy * 70 + repetition_bonus))


def mastery_level(state: ProgressState, item_id: str) -> MasteryLevel:
    return MasteryLevel.from_score(mastery(state, item_id))


def is_mastered(
    progress: ItemProgress,
    min_answers: int = MASTERED_MIN_ANSWERS,
    min_accuracy: float = MASTERED_MIN_ACCURACY,
) -> bool:
    return progress.total_answers >= min_answers and progress.accuracy >= min_accuracy


# =============================================================================
# Aggregate Statistics
# =============================================================================


def statistics(
    state: ProgressState,
    today: date,
    min_answers: int = MASTERED_MIN_ANSWERS,
    min_accuracy: float = MASTERED_MIN_ACCURACY,
) -> StudyStatistics:
    """
    Compute aggregate statistics.

    Args:
        state: Current progress
        today: Calendar date used for due counts
        min_answers: Answers needed before an item can count as mastered
        min_accuracy: Accuracy needed for an item to count as mastered

    Returns:
        StudyStatistics
    """
    total = state.total_correct + state.total_incorrect
    accuracy = (state.total_correct / total) * 100 if total > 0 else 0.0

    items = list(state.muscles.values())
    mastered_count = sum(1 for p in items if is_mastered(p, min_answers, min_accuracy))
    needs_review_count = sum(
        1 for p in items if p.next_review_date is not None and p.next_review_date <= today
    )

    total_study_time = sum(s.duration for s in state.sessions)
    avg_session_duration = total_study_time / len(state.sessions) if state.sessions else 0

    return StudyStatistics(
        total_answered=total,
        total_correct=state.total_correct,
        total_incorrect=state.total_incorrect,
        accuracy=float(round_half_up(accuracy, 1)),
        streak_days=state.streak_days,
        sessions_count=len(state.sessions),
        mastered_count=mastered_count,
        needs_review_count=needs_review_count,
        muscles_studied=len(state.muscles),
        total_study_time=total_study_time,
        avg_session_duration=round_half_up(avg_session_duration),
    )


# =============================================================================
# Catalog Views
# =============================================================================


def mastery_distribution(state: ProgressState, item_ids: Iterable[str]) -> dict[MasteryLevel, int]:
    """Count catalog items per mastery level."""
    distribution = {level: 0 for level in MasteryLevel}
    for item_id in item_ids:
        distribution[mastery_level(state, item_id)] += 1
    return distribution


def items_by_priority(
    state: ProgressState,
    item_ids: Iterable[str],
    limit: int = 10,
) -> list[tuple[str, int, ItemProgress | None]]:
    """
    Items most in need of attention: lowest mastery first.

    Ties keep catalog order.

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    ranked = [(item_id, mastery(state, item_id), state.muscles.get(item_id)) for item_id in item_ids]
    ranked.sort(key=lambda row: row[1])
    return ranked[:limit]


def coverage(state: ProgressState, item_ids: Iterable[str]) -> float:
    """Percent of catalog items answered at least once."""
    catalog = list(item_ids)
    if not catalog:
        return 0.0
    studied = sum(1 for item_id in catalog if item_id in state.muscles)
    return studied / len(catalog) * 100


def format_duration(seconds: int) -> str:
    """Compact duration: 45s, 12m, 1h 5m."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"
