# PATH: core/time.py
"""
Time utilities for the token registry.

Manifest timestamps are ISO-8601 UTC with millisecond precision and a
trailing "Z", e.g. 2026-01-04T12:00:00.000Z.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """
    Format a datetime as a manifest timestamp.

    Naive datetimes are assumed to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
