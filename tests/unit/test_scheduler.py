"""
Unit tests for the SM-2 scheduler.

Tests:
- Interval growth per repetition count
- Reset on failing grades
- Ease factor update and floor
- Applying a review to ItemProgress
"""

from datetime import date

import pytest

from musclestudy.progress.models import ItemProgress
from musclestudy.progress.scheduler import (
    GOOD_RECALL,
    POOR_RECALL,
    SM2Config,
    SM2Scheduler,
    next_state,
)


class TestIntervals:
    """Interval depends on how many qualifying reviews came before."""

    @pytest.mark.parametrize("quality", [3, 4, 5])
    def test_first_qualifying_review_is_one_day(self, quality):
        result = next_state(quality, repetitions=0, ease_factor=2.5, interval=0)

        assert result.interval == 1
        assert result.repetitions == 1

    @pytest.mark.parametrize("quality", [3, 4, 5])
    def test_second_qualifying_review_is_six_days(self, quality):
        result = next_state(quality, repetitions=1, ease_factor=2.5, interval=1)

        assert result.interval == 6
        assert result.repetitions == 2

    @pytest.mark.parametrize(
        "quality,repetitions,ease,interval,expected",
        [
            (4, 2, 2.5, 6, 15),
            (5, 3, 2.6, 15, 39),
            (3, 5, 1.3, 10, 13),
            (4, 2, 1.5, 5, 8),  # 7.5 rounds up
        ],
    )
    def test_later_reviews_multiply_by_prior_ease(self, quality, repetitions, ease, interval, expected):
        result = next_state(quality, repetitions, ease, interval)

        assert result.interval == expected
        assert result.repetitions == repetitions + 1

    @pytest.mark.parametrize("quality", [0, 1, 2])
    @pytest.mark.parametrize("repetitions,interval", [(0, 0), (1, 1), (3, 15), (8, 120)])
    def test_failing_review_resets(self, quality, repetitions, interval):
        result = next_state(quality, repetitions, ease_factor=2.5, interval=interval)

        assert result.repetitions == 0
        assert result.interval == 1


class TestEaseFactor:
    """Ease factor update applies on every grade and never drops below 1.3."""

    @pytest.mark.parametrize(
        "quality,expected",
        [
            (5, 2.6),
            (4, 2.5),
            (3, 2.36),
            (2, 2.18),
            (1, 1.96),
            (0, 1.7),
        ],
    )
    def test_ease_update_formula(self, quality, expected):
        result = next_state(quality, repetitions=0, ease_factor=2.5, interval=0)

        assert result.ease_factor == pytest.approx(expected)

    def test_ease_shrinks_on_repeated_failures_but_stops_at_floor(self):
        ease = 2.5
        repetitions, interval = 0, 0
        seen = []
        for _ in range(20):
            result = next_state(0, repetitions, ease, interval)
            ease, repetitions, interval = result.ease_factor, result.repetitions, result.interval
            seen.append(ease)

        assert all(value >= 1.3 for value in seen)
        assert seen[-1] == 1.3
        assert seen[0] > seen[1]

    def test_good_recall_keeps_ease(self):
        result = next_state(GOOD_RECALL, repetitions=4, ease_factor=2.1, interval=20)

        assert result.ease_factor == pytest.approx(2.1)

    def test_poor_recall_at_floor_stays_at_floor(self):
        result = next_state(POOR_RECALL, repetitions=0, ease_factor=1.3, interval=1)

        assert result.ease_factor == 1.3

    @pytest.mark.parametrize("quality", [-1, 6])
    def test_out_of_range_quality_rejected(self, quality):
        with pytest.raises(ValueError):
            next_state(quality, repetitions=0, ease_factor=2.5, interval=0)

    def test_deterministic(self):
        assert next_state(4, 2, 2.5, 6) == next_state(4, 2, 2.5, 6)


class TestSM2Scheduler:
    """Applying reviews to ItemProgress."""

    def test_new_item_defaults(self):
        progress = SM2Scheduler().new_item("Trapezius")

        assert progress.item_id == "Trapezius"
        assert progress.ease_factor == 2.5
        assert progress.interval == 0
        assert progress.repetitions == 0
        assert progress.next_review_date is None

    def test_review_sets_dates_and_counts(self):
        scheduler = SM2Scheduler()
        today = date(2025, 3, 10)

        updated = scheduler.review(scheduler.new_item("Trapezius"), GOOD_RECALL, today)

        assert updated.correct_count == 1
        assert updated.incorrect_count == 0
        assert updated.last_reviewed == today
        assert updated.next_review_date == date(2025, 3, 11)

    def test_review_does_not_modify_input(self):
        scheduler = SM2Scheduler()
        original = ItemProgress(item_id="Soleus", repetitions=2, interval=6)

        scheduler.review(original, POOR_RECALL, date(2025, 3, 10))

        assert original.repetitions == 2
        assert original.incorrect_count == 0

    def test_next_review_crosses_month_boundary(self):
        scheduler = SM2Scheduler()
        progress = ItemProgress(item_id="Soleus", repetitions=2, interval=6, ease_factor=2.5)

        updated = scheduler.review(progress, GOOD_RECALL, date(2025, 1, 25))

        assert updated.interval == 15
        assert updated.next_review_date == date(2025, 2, 9)

    def test_custom_config(self):
        scheduler = SM2Scheduler(SM2Config(first_interval=2, second_interval=5))
        first = scheduler.review(scheduler.new_item("Soleus"), GOOD_RECALL, date(2025, 3, 10))
        second = scheduler.review(first, GOOD_RECALL, date(2025, 3, 12))

        assert first.interval == 2
        assert second.interval == 5

    def test_interval_beyond_calendar_clamps_date(self):
        scheduler = SM2Scheduler()
        progress = ItemProgress(item_id="Soleus", repetitions=16, interval=2270520, ease_factor=2.5)

        updated = scheduler.review(progress, GOOD_RECALL, date(2025, 3, 10))

        assert updated.interval == 5676300
        assert updated.next_review_date == date.max
        assert not updated.is_due(date(2025, 3, 10))
