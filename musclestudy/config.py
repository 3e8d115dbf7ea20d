"""
Configuration settings for muscle-study.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a MUSCLESTUDY_* environment variable,
e.g. MUSCLESTUDY_STORAGE_DIR=/tmp/progress.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MUSCLESTUDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    storage_dir: Path = Field(
        default=Path.home() / ".musclestudy",
        description="Directory holding the progress JSON file",
    )
    storage_key: str = Field(
        default="anatomy-study-progress",
        description="Storage key; the progress file is <storage_key>.json",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Loguru level for the CLI stderr sink",
    )

    # ========================================
    # Statistics
    # ========================================
    mastered_min_answers: int = Field(
        default=5,
        ge=1,
        description="Answers needed before an item can count as mastered",
    )
    mastered_min_accuracy: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Accuracy needed for an item to count as mastered",
    )
    attention_limit: int = Field(
        default=10,
        ge=1,
        description="Number of items shown in the needs-attention list",
    )

    # ========================================
    # Streaks
    # ========================================
    streak_restart_on_gap: bool = Field(
        default=False,
        description=(
            "Restart the streak at 1 when a session closes after a gap of two or "
            "more days. When off, the gap is only applied at the next load."
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
