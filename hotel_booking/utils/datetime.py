"""UTC datetime and calendar-date utilities."""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This function should be used instead of datetime.now() or datetime.utcnow()
    to ensure all timestamps are timezone-aware and stored in UTC.

    Returns:
        Timezone-aware datetime in UTC

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes read back from the database.

    Some drivers (SQLite) drop the offset of timezone-aware columns, every
    timestamp this service writes is UTC so a naive value is interpreted as such.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between(start: date, end: date) -> Iterator[date]:
    """
    Yield every calendar day from start to end, both inclusive.

    Example:
        >>> list(days_between(date(2024, 6, 1), date(2024, 6, 3)))
        [datetime.date(2024, 6, 1), datetime.date(2024, 6, 2), datetime.date(2024, 6, 3)]
    """
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
