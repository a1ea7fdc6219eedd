"""
Datetime utility functions for handling timezone-aware datetimes.
"""
from datetime import datetime, timezone
from typing import Optional


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Ensure a datetime object is timezone-aware (UTC).

    Repositories may hand back naive datetimes next to aware ones; comparing
    the two raises ``TypeError``, so every timestamp is normalized before
    min/max or subtraction.

    Args:
        dt: The datetime to ensure is timezone-aware

    Returns:
        A timezone-aware datetime object in UTC

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def elapsed_seconds(started_at: datetime, completed_at: Optional[datetime]) -> Optional[float]:
    """
    Seconds between two timestamps, or None when the end is missing.

    The result may be zero or negative (clock anomalies); callers decide
    whether to exclude such values.
    """
    if completed_at is None:
        return None
    delta = ensure_timezone_aware(completed_at) - ensure_timezone_aware(started_at)
    return delta.total_seconds()
