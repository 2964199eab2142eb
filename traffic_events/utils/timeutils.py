"""Timestamp helpers.

Stored timestamps are naive UTC strings in ``YYYY-MM-DD HH:MM:SS`` form.
Clients may send any ISO-8601 value; offsets (including a trailing ``Z``)
are converted to UTC before storage.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..errors import ValidationError

STORAGE_FORMAT = '%Y-%m-%d %H:%M:%S'
DISPLAY_FORMAT = '%Y-%m-%d %H:%M'

def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)

def parse_timestamp(value: Any, field: str = 'timestamp') -> datetime:
    """Parse an ISO-8601 string (or datetime) into a naive UTC datetime.

    Raises:
        ValidationError: If the value is not a recognisable timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid {field}: expected an ISO-8601 timestamp") from None
    else:
        raise ValidationError(f"Invalid {field}: expected an ISO-8601 timestamp")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=0)

def normalize_timestamp(value: Any, field: str = 'timestamp') -> Optional[str]:
    """Return the storage form of an optional timestamp, or None when absent."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_timestamp(value, field).strftime(STORAGE_FORMAT)

def format_storage(moment: datetime) -> str:
    return moment.strftime(STORAGE_FORMAT)

def hours_after(moment: datetime, hours: float) -> datetime:
    return moment + timedelta(hours=hours)
