"""Date conversion utilities"""

from datetime import date, datetime, timezone
from typing import Any, Optional


def to_epoch_millis(value: Optional[datetime]) -> Optional[int]:
    """Serialize a datetime as integer milliseconds since the Unix epoch (naive = UTC)"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def from_epoch_millis(millis: int) -> datetime:
    """Parse epoch milliseconds into a timezone-aware UTC datetime"""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def parse_stored_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a stored date value into a datetime.

    Accepts datetimes, dates, ISO-8601 strings and epoch milliseconds.
    Anything else (including None) becomes None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return from_epoch_millis(int(value))
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None
