"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def trailing_window(end: date, days: int) -> List[date]:
    """The `days` calendar dates ending on `end` (inclusive), oldest first"""
    if days <= 0:
        return []
    return generate_date_range(end - timedelta(days=days - 1), end)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Normalize a datetime-ish value to a naive UTC datetime.

    Accepts datetime, date (midnight) or ISO-8601 strings, including the
    trailing "Z" timestamps the database emits. Aware values are converted
    to UTC and stripped so they compare against naive ones.
    Returns None for anything else.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return None


def to_date(value: Any) -> Optional[date]:
    """Normalize a date-ish value to a date (datetimes are truncated)"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    moment = to_datetime(value)
    return moment.date() if moment is not None else None
