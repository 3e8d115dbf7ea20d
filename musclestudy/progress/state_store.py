"""
Persistence boundary for study progress.

The repository only needs three operations from storage:

    load()  -> dict | None   # None when nothing is stored or it is unreadable
    save(d) -> bool          # False when the write failed
    clear() -> None

JsonFileStorage keeps the whole state as one JSON document named after a
fixed storage key (default location: ~/.musclestudy/anatomy-study-progress.json).
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

DEFAULT_STORAGE_KEY = "anatomy-study-progress"


class ProgressStorage(Protocol):
    """Durable key-value slot holding the serialized ProgressState."""

    def load(self) -> dict[str, Any] | None: ...

    def save(self, data: dict[str, Any]) -> bool: ...

    def clear(self) -> None: ...


class JsonFileStorage:
    """
    Stores progress as a single JSON file.

    Writes go to a sibling temp file first and are moved into place, so a
    crash mid-write leaves the previous state intact.
    """

    DEFAULT_DIR = Path.home() / ".musclestudy"

    def __init__(self, directory: Path | None = None, key: str = DEFAULT_STORAGE_KEY):
        self.directory = Path(directory) if directory else self.DEFAULT_DIR
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to parse study progress at {self.path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring study progress at {self.path}: not a JSON object")
            return None
        return data

    def save(self, data: dict[str, Any]) -> bool:
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save study progress to {self.path}: {e}")
            return False
        return True

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to clear study progress at {self.path}: {e}")


class MemoryStorage:
    """In-process storage. Holds a deep copy so callers cannot alias it."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data = copy.deepcopy(data)
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self.data)

    def save(self, data: dict[str, Any]) -> bool:
        self.data = copy.deepcopy(data)
        self.save_count += 1
        return True

    def clear(self) -> None:
        self.data = None
