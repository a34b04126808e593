"""Small datetime helpers shared by services."""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to an aware UTC datetime.

    SQLite hands back naive datetimes for ``DateTime(timezone=True)`` columns;
    values are always stored as UTC, so a naive value is read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
