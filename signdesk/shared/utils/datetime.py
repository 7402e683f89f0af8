"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository boundaries to normalize datetimes read from the store.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as returned by the REST backend.

    PostgREST emits offsets like "+00:00"; a trailing "Z" is also accepted.

    Args:
        value: ISO string or None

    Returns:
        UTC-aware datetime, or None when value is empty
    """
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def from_timestamp_utc(timestamp: float) -> datetime:
    """
    Create a UTC-aware datetime from a Unix timestamp.
    Use instead of datetime.fromtimestamp() which returns naive local time.

    Args:
        timestamp: Unix timestamp (seconds since epoch)

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(timestamp, tz=UTC)
