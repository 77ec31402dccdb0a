"""Datetime utilities for persistence layer."""

from datetime import datetime, timezone


def normalize_to_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime.

    SQLite drops timezone info, so naive values are read back as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
