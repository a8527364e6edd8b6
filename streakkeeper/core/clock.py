"""
Time source for the engine.

All timestamps are naive local datetimes, matching how the bot reasons about
"today" (local midnight). Functions that need the current time take an optional
``now`` so callers can pin it.
"""
from datetime import datetime


def now() -> datetime:
    return datetime.now()


def local_midnight(at: datetime | None = None) -> datetime:
    """Return 00:00 of the day containing *at* (defaults to now)."""
    at = at or now()
    return at.replace(hour=0, minute=0, second=0, microsecond=0)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from *start* to *end*, truncated toward zero (hours / 24)."""
    hours = (end - start).total_seconds() / 3600
    return int(hours / 24)
