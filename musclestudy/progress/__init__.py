"""
Study progress tracking with SM-2 spaced repetition.

Components:
- next_state / SM2Scheduler: Spaced repetition algorithm
- ProgressState, ItemProgress, SessionRecord: Persisted data model
- JsonFileStorage, MemoryStorage: Persistence backends
- SessionTracker: Active study session state machine
- ProgressRepository: Load, mutate and persist progress
- queries: Due lists, mastery and statistics
- StudyProgressTracker: Public entry point
"""

from .models import ActiveSession, ItemProgress, ProgressState, SessionRecord
from .queries import MasteryLevel, StudyStatistics, format_duration
from .repository import ProgressRepository
from .scheduler import GOOD_RECALL, POOR_RECALL, SM2Config, SM2Result, SM2Scheduler, next_state
from .session import LiveSessionStats, SessionStatus, SessionTracker
from .state_store import JsonFileStorage, MemoryStorage, ProgressStorage
from .tracker import StudyProgressTracker

__all__ = [
    # Scheduling
    "next_state",
    "SM2Config",
    "SM2Result",
    "SM2Scheduler",
    "GOOD_RECALL",
    "POOR_RECALL",
    # Data model
    "ItemProgress",
    "SessionRecord",
    "ProgressState",
    "ActiveSession",
    # Persistence
    "ProgressStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "ProgressRepository",
    # Sessions
    "SessionTracker",
    "SessionStatus",
    "LiveSessionStats",
    # Queries
    "MasteryLevel",
    "StudyStatistics",
    "format_duration",
    # Entry point
    "StudyProgressTracker",
]
