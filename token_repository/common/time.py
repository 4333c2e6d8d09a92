"""
Time Utilities

Policy:
- Token instants are timezone-aware UTC datetimes.
- Naive datetimes are treated as UTC.
- Redis TTLs are whole seconds, rounded up.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is UTC-aware.

    - If `dt` is naive, treat it as UTC.
    - If `dt` is timezone-aware, convert it to UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def ttl_seconds(expiry: datetime, now: Optional[datetime] = None) -> int:
    """
    Convert an absolute expiry instant into a Redis TTL.

    The remaining lifetime is rounded up, so any expiry strictly after
    `now` gives a TTL of at least one second. Zero or negative results
    mean the instant has already passed.

    Args:
        expiry: Absolute expiry instant
        now: Reference instant (defaults to the current UTC time)

    Returns:
        int: Remaining lifetime in whole seconds
    """
    reference = ensure_utc(now) if now is not None else utc_now()
    remaining = (ensure_utc(expiry) - reference).total_seconds()
    return math.ceil(remaining)
