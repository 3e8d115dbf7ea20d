"""
SM-2 Spaced Repetition Scheduler.

Computes the next scheduling state for one study item from an answer
quality grade.

SM-2 Grade Scale:
0 - Complete blackout, wrong response
1 - Incorrect, but upon seeing answer remembered
2 - Incorrect, but answer seemed easy to recall
3 - Correct, but with significant difficulty
4 - Correct, with some hesitation
5 - Correct, with perfect recall

Only two grades are emitted by the tracker: GOOD_RECALL (4) for a correct
answer and POOR_RECALL (1) for an incorrect one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from loguru import logger

from .models import ItemProgress
from .utils import add_days, round_half_up

GOOD_RECALL = 4
POOR_RECALL = 1
PASSING_GRADE = 3

# =============================================================================
# SM-2 Algorithm
# =============================================================================


@dataclass(frozen=True)
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days after first qualifying review
    second_interval: int = 6  # Days after second qualifying review


DEFAULT_CONFIG = SM2Config()


@dataclass(frozen=True)
class SM2Result:
    """Scheduling state produced by one review."""

    interval: int
    repetitions: int
    ease_factor: float


def next_state(
    quality: int,
    repetitions: int,
    ease_factor: float,
    interval: int,
    config: SM2Config | None = None,
) -> SM2Result:
    """
    Calculate the next SM-2 state.

    Args:
        quality: Answer grade (0-5)
        repetitions: Consecutive qualifying reviews so far
        ease_factor: Current easiness factor
        interval: Current interval in days
        config: Algorithm constants (defaults if None)

    Returns:
        SM2Result with the new interval, repetitions and ease factor
    """
    config = config or DEFAULT_CONFIG
    if not 0 <= quality <= 5:
        raise ValueError(f"SM-2 quality must be between 0 and 5, got {quality}")

    if quality >= PASSING_GRADE:
        if repetitions == 0:
            new_interval = config.first_interval
        elif repetitions == 1:
            new_interval = config.second_interval
        else:
            # Grows with the ease factor from before this review
            new_interval = round_half_up(interval * ease_factor)
        new_repetitions = repetitions + 1
    else:
        new_repetitions = 0
        new_interval = config.first_interval

    # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), applied on both branches
    ef_delta = 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)
    new_ef = max(config.minimum_easiness, ease_factor + ef_delta)

    return SM2Result(
        interval=new_interval,
        repetitions=new_repetitions,
        ease_factor=new_ef,
    )


class SM2Scheduler:
    """
    Applies the SM-2 algorithm to ItemProgress records.

    Each item has:
    - Easiness Factor (EF): How easy the item is (2.5 default, min 1.3)
    - Interval: Days until next review
    - Repetitions: Consecutive correct recalls
    """

    def __init__(self, config: SM2Config | None = None):
        self.config = config or DEFAULT_CONFIG

    def new_item(self, item_id: str) -> ItemProgress:
        """Default progress for an item that has never been answered."""
        return ItemProgress(item_id=item_id, ease_factor=self.config.initial_easiness)

    def review(self, progress: ItemProgress, quality: int, today: date) -> ItemProgress:
        """
        Record one review of an item.

        Args:
            progress: Current progress (not modified)
            quality: SM-2 grade (0-5)
            today: Calendar date of the review

        Returns:
            New ItemProgress with updated counters and schedule
        """
        result = next_state(
            quality,
            progress.repetitions,
            progress.ease_factor,
            progress.interval,
            self.config,
        )
        correct = quality >= PASSING_GRADE

        updated = ItemProgress(
            item_id=progress.item_id,
            correct_count=progress.correct_count + (1 if correct else 0),
            incorrect_count=progress.incorrect_count + (0 if correct else 1),
            last_reviewed=today,
            next_review_date=add_days(today, result.interval),
            ease_factor=result.ease_factor,
            interval=result.interval,
            repetitions=result.repetitions,
        )

        logger.debug(
            f"Reviewed {progress.item_id}: grade={quality}, "
            f"next_review={updated.next_review_date}, interval={updated.interval}d"
        )
        return updated
