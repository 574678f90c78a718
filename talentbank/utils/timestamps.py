"""UTC timestamp helpers.

Timestamps are stored as ISO 8601 strings with a ``Z`` suffix and always
handled as timezone-aware UTC datetimes in memory.
"""

from datetime import datetime, timezone
from typing import Optional

STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return ``dt`` as an aware UTC datetime.

    Naive datetimes are treated as UTC; aware ones are converted.

    Example:
        >>> ensure_utc(datetime(2025, 11, 4, 12, 0)).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime for storage (sortable as plain text)."""
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return None
    return dt_utc.strftime(STORAGE_FORMAT)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored or ISO 8601 timestamp into an aware UTC datetime.

    Accepts ``2025-11-04T12:00:00.123456Z``, ``2025-11-04T12:00:00Z``,
    ``2025-11-04T12:00:00+02:00`` and ``2025-11-04``. Returns None for empty
    input.

    Raises:
        ValueError: If the string is not a recognizable timestamp
    """
    if value is None or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    return ensure_utc(datetime.fromisoformat(text))
