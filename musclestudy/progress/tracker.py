"""
Study progress tracker: the public entry point.

Wires the repository, session tracker and query layer together so callers
(a quiz view, the CLI) only report answers and session boundaries:

    tracker = StudyProgressTracker.from_settings()
    tracker.start_session()
    tracker.record_correct("Biceps brachii")
    tracker.record_incorrect("Deltoideus")
    tracker.end_session()
    tracker.get_statistics()
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime

from .. import config
from . import queries
from .models import ItemProgress, ProgressState, SessionRecord
from .queries import StudyStatistics
from .repository import ProgressRepository
from .scheduler import SM2Scheduler
from .session import LiveSessionStats, SessionStatus, SessionTracker
from .state_store import JsonFileStorage, ProgressStorage
from .utils import utc_now, utc_today


class StudyProgressTracker:
    """
    Records answers and study sessions, and answers progress queries.

    Every answer updates both the long-term per-item schedule and, when a
    session is active, the session's live counters.
    """

    def __init__(
        self,
        storage: ProgressStorage,
        clock: Callable[[], datetime] = utc_now,
        scheduler: SM2Scheduler | None = None,
        settings: config.Settings | None = None,
    ):
        """
        Initialize the tracker and load persisted progress.

        Args:
            storage: Persistence backend
            clock: Source of the current instant (UTC)
            scheduler: SM-2 scheduler (creates default if None)
            settings: Thresholds and streak behaviour (defaults if None)
        """
        self.settings = settings or config.Settings()
        self.clock = clock
        self.repository = ProgressRepository(
            storage,
            scheduler=scheduler,
            clock=clock,
            streak_restart_on_gap=self.settings.streak_restart_on_gap,
        )
        self.session = SessionTracker()

    @classmethod
    def from_settings(cls, settings: config.Settings | None = None) -> StudyProgressTracker:
        """Tracker backed by the JSON file configured in settings."""
        settings = settings or config.get_settings()
        storage = JsonFileStorage(settings.storage_dir, settings.storage_key)
        return cls(storage, settings=settings)

    def today(self) -> date:
        return utc_today(self.clock())

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def progress(self) -> ProgressState:
        """Raw progress state. Treat as read-only."""
        return self.repository.state

    @property
    def session_stats(self) -> LiveSessionStats:
        return self.session.live_stats()

    @property
    def session_status(self) -> SessionStatus:
        return self.session.status

    # =========================================================================
    # Recording
    # =========================================================================

    def record_correct(self, item_id: str) -> ItemProgress:
        progress = self.repository.record_correct(item_id)
        self.session.record(item_id, correct=True)
        return progress

    def record_incorrect(self, item_id: str) -> ItemProgress:
        progress = self.repository.record_incorrect(item_id)
        self.session.record(item_id, correct=False)
        return progress

    def start_session(self) -> None:
        self.session.start(self.clock())

    def end_session(self) -> SessionRecord | None:
        """
        Close the active session.

        Returns:
            The SessionRecord added to history, or None when nothing was
            answered (or no session was active)
        """
        record = self.session.end(self.clock())
        if record is not None:
            self.repository.append_session(record)
        return record

    def reset_progress(self) -> None:
        """
        Delete all stored progress. Irreversible.

        An active session keeps running; its counters are not part of the
        stored progress.
        """
        self.repository.reset()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_muscles_due_for_review(self, item_ids: Iterable[str]) -> list[str]:
        return queries.due_for_review(self.progress, item_ids, self.today())

    def get_muscles_mastery(self, item_id: str) -> int:
        return queries.mastery(self.progress, item_id)

    def get_statistics(self) -> StudyStatistics:
        return queries.statistics(
            self.progress,
            self.today(),
            min_answers=self.settings.mastered_min_answers,
            min_accuracy=self.settings.mastered_min_accuracy,
        )

    def get_mastery_distribution(self, item_ids: Iterable[str]) -> dict[queries.MasteryLevel, int]:
        return queries.mastery_distribution(self.progress, item_ids)

    def get_items_needing_attention(
        self,
        item_ids: Iterable[str],
        limit: int | None = None,
    ) -> list[tuple[str, int, ItemProgress | None]]:
        return queries.items_by_priority(
            self.progress,
            item_ids,
            limit=limit if limit is not None else self.settings.attention_limit,
        )

    def get_coverage(self, item_ids: Iterable[str]) -> float:
        return queries.coverage(self.progress, item_ids)
