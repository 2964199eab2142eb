"""Event model definition."""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Double,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    column,
    func,
)

from ..errors import ValidationError
from ..utils.timeutils import normalize_timestamp

# Accepted request keys for each field, in order of preference
FIELD_ALIASES = {
    'latitude': ('latitude', 'lat'),
    'longitude': ('longitude', 'long'),
    'type': ('type', 'status'),
}

@dataclass
class Event:
    """
    Event model representing a geo-tagged traffic incident.

    Fields:
        id: Unique identifier assigned by storage
        latitude: Latitude of the incident
        longitude: Longitude of the incident
        created_time: When the record was stored (storage default)
        start_time: When the incident starts (optional)
        end_time: When the incident ends; None means ongoing
        note: Free text description
        type: Status value from the deployment's configured set

    Timestamps are minute-precision strings (``YYYY-MM-DD HH:MM``).
    """
    id: int
    latitude: float
    longitude: float
    created_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    note: str = ''
    type: str = ''

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Event':
        """Build an Event from a normalized storage row."""
        return cls(
            id=int(row['id']),
            latitude=float(row['latitude']),
            longitude=float(row['longitude']),
            type=row['type'],
            created_time=row.get('created_time'),
            start_time=row.get('start_time'),
            end_time=row.get('end_time'),
            note=row.get('note') or '',
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

def _pick(payload: Dict[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES[name]:
        if payload.get(key) is not None:
            return payload[key]
    return None

def _coordinate(value: Any, name: str) -> float:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}: must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid {name}: must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {name}: must be a finite number")
    return number

@dataclass
class NewEvent:
    """Validated payload for creating an event."""
    latitude: float
    longitude: float
    type: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    note: str = ''

    @classmethod
    def from_payload(cls, payload: Any, allowed_types: Iterable[str]) -> 'NewEvent':
        """
        Validate a create request body.

        Args:
            payload: Decoded JSON request body
            allowed_types: The deployment's permitted ``type`` values

        Raises:
            ValidationError: If a required field is missing or a value is invalid
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        for name in ('latitude', 'longitude', 'type'):
            if _pick(payload, name) is None:
                raise ValidationError(f"Missing required field: {name}")

        allowed = tuple(allowed_types)
        event_type = _pick(payload, 'type')
        if not isinstance(event_type, str) or event_type not in allowed:
            raise ValidationError(f"Invalid type. Must be one of: {', '.join(allowed)}")

        note = payload.get('note')
        if note is None:
            note = ''
        elif not isinstance(note, str):
            raise ValidationError("Invalid note: must be a string")

        return cls(
            latitude=_coordinate(_pick(payload, 'latitude'), 'latitude'),
            longitude=_coordinate(_pick(payload, 'longitude'), 'longitude'),
            type=event_type,
            start_time=normalize_timestamp(payload.get('start_time'), 'start_time'),
            end_time=normalize_timestamp(payload.get('end_time'), 'end_time'),
            note=note,
        )

def build_events_table(metadata: MetaData, allowed_types: Iterable[str]) -> Table:
    """Declare the ``events`` table with a CHECK constraint over the allowed types."""
    return Table(
        'events',
        metadata,
        Column('id', Integer, primary_key=True, autoincrement=True),
        Column('latitude', Double, nullable=False),
        Column('longitude', Double, nullable=False),
        Column('created_time', DateTime, server_default=func.current_timestamp()),
        Column('start_time', DateTime),
        Column('end_time', DateTime),
        Column('note', Text),
        Column('type', String(32), nullable=False),
        CheckConstraint(column('type').in_(list(allowed_types)), name='ck_events_type'),
        sqlite_autoincrement=True,
    )
