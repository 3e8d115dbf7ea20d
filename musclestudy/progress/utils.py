"""
Calendar and rounding helpers.

All progress dates are UTC calendar dates (no time of day), persisted as
ISO ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


def utc_today(now: datetime | None = None) -> date:
    """Calendar date of ``now`` (or the current instant) in UTC."""
    now = now or utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(UTC)
    return now.date()


def add_days(day: date, days: int) -> date:
    """``day`` shifted by ``days``, clamped to the representable calendar."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def is_same_day(a: date, b: date) -> bool:
    return a == b


def is_yesterday(day: date, today: date) -> bool:
    return day == today - timedelta(days=1)


def parse_date(value: str | date | None) -> date | None:
    """
    Parse a persisted date value.

    Accepts ``YYYY-MM-DD`` and full ISO timestamps (only the date part is
    kept). Raises ValueError for anything else.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def format_date(value: date | None) -> str | None:
    return value.isoformat() if value else None


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """Round halves up, like JavaScript ``Math.round`` (``round_half_up(2.5) == 3``)."""
    if ndigits == 0:
        return int(math.floor(value + 0.5))
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor
