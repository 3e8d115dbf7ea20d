"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from musclestudy.config import Settings
from musclestudy.progress import MemoryStorage, StudyProgressTracker


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """Clock fixed at 2025-03-10 09:00 UTC."""
    return FakeClock(datetime(2025, 3, 10, 9, 0, tzinfo=UTC))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_dir=tmp_path, _env_file=None)


@pytest.fixture
def tracker(storage, clock, settings):
    """Tracker on in-memory storage with a fixed clock."""
    return StudyProgressTracker(storage, clock=clock, settings=settings)


@pytest.fixture
def sample_progress():
    """Persisted progress blob in the browser app's format."""
    return {
        "muscles": {
            "Biceps brachii": {
                "muscleName": "Biceps brachii",
                "correctCount": 4,
                "incorrectCount": 1,
                "lastReviewed": "2025-03-08",
                "nextReviewDate": "2025-03-14",
                "easeFactor": 2.36,
                "interval": 6,
                "repetitions": 2,
            },
            "Deltoideus": {
                "muscleName": "Deltoideus",
                "correctCount": 0,
                "incorrectCount": 2,
                "lastReviewed": "2025-03-08",
                "nextReviewDate": "2025-03-09",
                "easeFactor": 1.96,
                "interval": 1,
                "repetitions": 0,
            },
        },
        "sessions": [
            {
                "date": "2025-03-08",
                "correctCount": 4,
                "incorrectCount": 3,
                "musclesStudied": 2,
                "duration": 300,
            },
        ],
        "totalCorrect": 4,
        "totalIncorrect": 3,
        "streakDays": 3,
        "lastStudyDate": "2025-03-09",
        "startDate": "2025-03-01",
    }
