"""
Progress Repository.

Owns the full ProgressState: per-item schedules, session history and the
aggregate counters. Every mutation writes the whole state back to storage
before returning.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import date, datetime

from loguru import logger

from .models import ItemProgress, ProgressState, SessionRecord
from .scheduler import GOOD_RECALL, POOR_RECALL, SM2Scheduler
from .state_store import ProgressStorage
from .utils import is_same_day, is_yesterday, utc_now, utc_today


class ProgressRepository:
    """
    Loads, mutates and persists ProgressState.

    Handles:
    - Load with fallback to defaults and streak decay
    - Item updates through the SM-2 scheduler
    - Session history and streak counting
    - Full reset
    """

    def __init__(
        self,
        storage: ProgressStorage,
        scheduler: SM2Scheduler | None = None,
        clock: Callable[[], datetime] = utc_now,
        streak_restart_on_gap: bool = False,
    ):
        """
        Initialize the repository and load persisted state.

        Args:
            storage: Persistence backend
            scheduler: SM-2 scheduler (creates default if None)
            clock: Source of the current instant
            streak_restart_on_gap: Restart the streak at 1 when a session
                closes after a gap of two or more days
        """
        self.storage = storage
        self.scheduler = scheduler or SM2Scheduler()
        self.clock = clock
        self.streak_restart_on_gap = streak_restart_on_gap

        self._lock = threading.RLock()
        self.state = self.load()

    def today(self) -> date:
        return utc_today(self.clock())

    # =========================================================================
    # Load / Save
    # =========================================================================

    def load(self) -> ProgressState:
        """
        Load persisted state, or defaults when none is usable.

        A streak whose last study day is older than yesterday is reset to 0.
        """
        today = self.today()
        data = self.storage.load()

        state: ProgressState | None = None
        if data is not None:
            try:
                state = ProgressState.from_dict(data, today)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Failed to parse study progress, starting fresh: {e}")

        if state is None:
            logger.info("No study progress found; starting with empty progress")
            return ProgressState.default(today)

        logger.info(
            f"Loaded study progress: {len(state.muscles)} items, "
            f"{len(state.sessions)} sessions"
        )

        last = state.last_study_date
        if last and not is_same_day(last, today) and not is_yesterday(last, today):
            if state.streak_days:
                logger.info(f"Streak of {state.streak_days} day(s) broken (last study {last})")
            state.streak_days = 0
            self._persist(state)

        return state

    def _persist(self, state: ProgressState | None = None) -> bool:
        state = state or self.state
        ok = self.storage.save(state.to_dict())
        if not ok:
            logger.warning("Study progress kept in memory only; last save failed")
        return ok

    # =========================================================================
    # Item Updates
    # =========================================================================

    def get_item(self, item_id: str) -> ItemProgress | None:
        return self.state.muscles.get(item_id)

    def record_answer(self, item_id: str, correct: bool) -> ItemProgress:
        """
        Apply one answer to an item's schedule and the global counters.

        Unknown item ids get fresh default progress.
        """
        quality = GOOD_RECALL if correct else POOR_RECALL

        with self._lock:
            existing = self.state.muscles.get(item_id) or self.scheduler.new_item(item_id)
            updated = self.scheduler.review(existing, quality, self.today())
            self.state.muscles[item_id] = updated

            if correct:
                self.state.total_correct += 1
            else:
                self.state.total_incorrect += 1

            self._persist()
            return updated

    def record_correct(self, item_id: str) -> ItemProgress:
        return self.record_answer(item_id, correct=True)

    def record_incorrect(self, item_id: str) -> ItemProgress:
        return self.record_answer(item_id, correct=False)

    # =========================================================================
    # Sessions
    # =========================================================================

    def append_session(self, record: SessionRecord) -> None:
        """Fold a closed session into history and update the streak."""
        with self._lock:
            today = record.date
            last = self.state.last_study_date

            if last is None:
                self.state.streak_days = 1
            elif is_same_day(last, today):
                pass  # Several sessions on one day count once
            elif is_yesterday(last, today):
                self.state.streak_days += 1
            elif self.streak_restart_on_gap:
                self.state.streak_days = 1
            # Otherwise the gap is handled by the streak check at load time

            self.state.sessions.append(record)
            self.state.last_study_date = today
            self._persist()

        logger.debug(f"Session recorded; streak is {self.state.streak_days} day(s)")

    # =========================================================================
    # Reset
    # =========================================================================

    def reset(self) -> None:
        """Replace all progress with defaults and clear storage. Irreversible."""
        with self._lock:
            self.state = ProgressState.default(self.today())
            self.storage.clear()
        logger.info("Study progress reset")
