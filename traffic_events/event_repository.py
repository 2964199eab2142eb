"""Event repository: the data-access contract used by the request handlers.

The repository builds every statement with ``?`` placeholders using the
storage backend's SQL dialect, so the same queries run unchanged against the
embedded file, the rqlite cluster and the pooled server. It holds no state
besides its collaborators; each operation is a fresh round trip.
"""

import logging
from typing import Any, Dict, List, Optional

from .config.events import EventsConfig
from .db.base import Storage
from .errors import NotFoundError, StorageError, ValidationError
from .models.event import Event, NewEvent
from .utils.timeutils import format_storage, normalize_timestamp, utc_now

logger = logging.getLogger(__name__)

class EventRepository:
    """CRUD and time-window queries over the ``events`` table."""

    def __init__(self, storage: Storage, config: Optional[EventsConfig] = None):
        self.storage = storage
        self.config = config or EventsConfig()

    def _select(self) -> str:
        minute = self.storage.dialect.minute
        return (
            "SELECT id, latitude, longitude, "
            f"{minute('created_time')} AS created_time, "
            f"{minute('start_time')} AS start_time, "
            f"{minute('end_time')} AS end_time, "
            "note, type FROM events"
        )

    async def list(
        self,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None
    ) -> List[Event]:
        """
        List events by start time window, newest first.

        Args:
            start_time: Inclusive lower bound on ``start_time``
            end_time: Inclusive upper bound on ``start_time`` (optional)

        Without any bound, and when the deployment does not require one, the
        currently active events are returned (no end time, or ending later
        than now).

        Raises:
            ValidationError: If a bound is malformed, or start_time is
                             required and missing
        """
        start = normalize_timestamp(start_time, 'start_time')
        end = normalize_timestamp(end_time, 'end_time')

        if start is None and self.config.require_start_time:
            raise ValidationError("start_time is required")

        ts = self.storage.dialect.timestamp
        conditions = []
        params: List[Any] = []
        if start is not None:
            conditions.append(f"{ts('start_time')} >= {ts('?')}")
            params.append(start)
        if end is not None:
            conditions.append(f"{ts('start_time')} <= {ts('?')}")
            params.append(end)
        if not conditions:
            conditions.append(f"(end_time IS NULL OR {ts('end_time')} > {ts('?')})")
            params.append(format_storage(utc_now()))

        sql = (
            f"{self._select()} WHERE {' AND '.join(conditions)} "
            f"ORDER BY {ts('start_time')} DESC, id DESC"
        )
        logger.debug(f"Fetching events between {start} and {end}")
        rows = await self.storage.query(sql, params)
        logger.info(f"Found {len(rows)} events")
        return [Event.from_row(row) for row in rows]

    async def get(self, event_id: int) -> Event:
        """
        Fetch a single event by id.

        Raises:
            NotFoundError: If no event has this id
        """
        rows = await self.storage.query(f"{self._select()} WHERE id = ?", [event_id])
        if not rows:
            raise NotFoundError(f"Event {event_id} not found")
        return Event.from_row(rows[0])

    async def create(self, payload: Dict[str, Any]) -> int:
        """
        Validate and store a new event.

        Validation happens before any storage call, so an invalid payload
        never writes anything.

        Args:
            payload: Decoded request body (``lat``/``long``/``status`` aliases accepted)

        Returns:
            The id assigned by storage

        Raises:
            ValidationError: If a required field is missing or invalid
            StorageError: If the backend fails or returns no id
        """
        event = NewEvent.from_payload(payload, self.config.allowed_types)

        ts = self.storage.dialect.timestamp
        sql = (
            "INSERT INTO events (latitude, longitude, start_time, end_time, note, type) "
            f"VALUES (?, ?, {ts('?')}, {ts('?')}, ?, ?)"
        )
        params = [
            event.latitude,
            event.longitude,
            event.start_time,
            event.end_time,
            event.note,
            event.type,
        ]

        if self.storage.dialect.insert_returning:
            rows = await self.storage.query(f"{sql} RETURNING id", params)
            event_id = rows[0]['id'] if rows else None
        else:
            result = await self.storage.execute(sql, params)
            event_id = result.last_insert_id

        if event_id is None:
            raise StorageError("Storage did not report the id of the created event")

        logger.info(f"Created event {event_id} ({event.type}) at {event.latitude}, {event.longitude}")
        return int(event_id)

    async def delete(self, event_id: int, start_time: Optional[str] = None) -> None:
        """
        Delete an event by id.

        Args:
            event_id: Id of the event to delete
            start_time: Optional guard; when given, the stored start time must
                        match as well (compared after date normalization)

        Raises:
            ValidationError: If the guard is not a valid timestamp
            NotFoundError: If no row matched
        """
        guard = normalize_timestamp(start_time, 'start_time')

        sql = "DELETE FROM events WHERE id = ?"
        params: List[Any] = [event_id]
        if guard is not None:
            ts = self.storage.dialect.timestamp
            sql += f" AND {ts('start_time')} = {ts('?')}"
            params.append(guard)

        result = await self.storage.execute(sql, params)
        if result.rows_affected == 0:
            raise NotFoundError(f"Event {event_id} not found")

        logger.info(f"Deleted event {event_id}")
