"""Tests for the event repository against a real SQLite file."""

from datetime import timedelta

import pytest

from traffic_events.config.events import EventsConfig
from traffic_events.errors import NotFoundError, StorageError, ValidationError
from traffic_events.event_repository import EventRepository
from traffic_events.db.base import ExecuteResult
from traffic_events.db.dialects import POSTGRESQL_DIALECT
from traffic_events.utils.timeutils import format_storage, utc_now

from .conftest import RecordingStorage

def payload(**overrides):
    data = {
        'latitude': 17.41,
        'longitude': 78.48,
        'type': 'active',
        'start_time': '2025-01-01T10:00',
    }
    data.update(overrides)
    return data

async def test_created_event_is_retrievable(repository):
    event_id = await repository.create(payload(end_time='2025-01-01T12:30:45', note='Pothole'))

    event = await repository.get(event_id)

    assert event.id == event_id
    assert event.latitude == 17.41
    assert event.longitude == 78.48
    assert event.type == 'active'
    assert event.note == 'Pothole'
    assert event.start_time == '2025-01-01 10:00'
    assert event.end_time == '2025-01-01 12:30'
    assert len(event.created_time) == len('YYYY-MM-DD HH:MM')

async def test_ids_are_unique(repository):
    first = await repository.create(payload())
    second = await repository.create(payload())
    assert first != second

async def test_list_from_start_time_includes_and_excludes(repository):
    event_id = await repository.create(payload())

    included = await repository.list('2025-01-01T09:00')
    excluded = await repository.list('2025-01-01T11:00')

    assert [e.id for e in included] == [event_id]
    assert excluded == []

async def test_list_lower_bound_is_inclusive(repository):
    event_id = await repository.create(payload())
    assert [e.id for e in await repository.list('2025-01-01T10:00:00')] == [event_id]

async def test_list_window_is_inclusive_and_ordered_descending(repository):
    early = await repository.create(payload(start_time='2025-01-01T08:00'))
    middle = await repository.create(payload(start_time='2025-01-01T10:00'))
    late = await repository.create(payload(start_time='2025-01-01T12:00'))
    await repository.create(payload(start_time='2025-01-01T12:01'))

    events = await repository.list('2025-01-01T08:00', '2025-01-01T12:00')

    assert [e.id for e in events] == [late, middle, early]

async def test_list_compares_mixed_timestamp_formats(repository, sqlite_storage):
    # Rows written by other tools may carry ISO "T" separators
    await sqlite_storage.execute(
        "INSERT INTO events (latitude, longitude, start_time, note, type) VALUES (?, ?, ?, ?, ?)",
        [1.0, 2.0, '2025-01-01T10:00:00', '', 'active']
    )
    events = await repository.list('2025-01-01 09:59')
    assert len(events) == 1
    assert events[0].start_time == '2025-01-01 10:00'

async def test_list_converts_offsets_to_utc(repository):
    event_id = await repository.create(payload(start_time='2025-01-01T15:30:00+05:30'))
    assert [e.id for e in await repository.list('2025-01-01T10:00Z')] == [event_id]
    assert await repository.list('2025-01-01T10:01Z') == []

async def test_list_requires_start_time_by_default(repository):
    with pytest.raises(ValidationError, match='start_time is required'):
        await repository.list()

async def test_list_rejects_malformed_bounds(repository):
    with pytest.raises(ValidationError, match='end_time'):
        await repository.list('2025-01-01T10:00', 'not a date')

async def test_list_without_start_returns_active_events(sqlite_storage):
    repository = EventRepository(
        sqlite_storage,
        EventsConfig(allowed_types=('active', 'inactive'), require_start_time=False)
    )
    now = utc_now()
    ongoing = await repository.create(payload(end_time=None))
    upcoming_end = await repository.create(payload(end_time=format_storage(now + timedelta(hours=1))))
    await repository.create(payload(end_time=format_storage(now - timedelta(hours=1))))

    events = await repository.list()

    assert sorted(e.id for e in events) == sorted([ongoing, upcoming_end])

async def test_create_without_start_time_stores_null(repository, sqlite_storage):
    event_id = await repository.create({'lat': 1.5, 'long': 2.5, 'type': 'inactive'})
    event = await repository.get(event_id)
    assert event.start_time is None
    assert event.end_time is None

async def test_invalid_type_never_reaches_storage(recording_storage, events_config):
    repository = EventRepository(recording_storage, events_config)
    with pytest.raises(ValidationError):
        await repository.create(payload(type='gridlock'))
    assert recording_storage.calls == []

async def test_missing_id_from_storage_is_storage_error(events_config):
    storage = RecordingStorage(result=ExecuteResult(rows_affected=1, last_insert_id=None))
    repository = EventRepository(storage, events_config)
    with pytest.raises(StorageError):
        await repository.create(payload())

async def test_create_uses_returning_when_dialect_requires(events_config):
    storage = RecordingStorage(rows=[{'id': 41}])
    storage.dialect = POSTGRESQL_DIALECT
    repository = EventRepository(storage, events_config)

    assert await repository.create(payload()) == 41

    [(kind, sql, params)] = storage.calls
    assert kind == 'query'
    assert sql.endswith('RETURNING id')
    assert 'CAST(? AS TIMESTAMP)' in sql
    assert params == [17.41, 78.48, '2025-01-01 10:00:00', None, '', 'active']

async def test_get_missing_event(repository):
    with pytest.raises(NotFoundError):
        await repository.get(12345)

async def test_delete_by_id(repository):
    event_id = await repository.create(payload())
    await repository.delete(event_id)
    with pytest.raises(NotFoundError):
        await repository.get(event_id)

async def test_delete_unknown_id_leaves_table_unchanged(repository):
    event_id = await repository.create(payload())
    with pytest.raises(NotFoundError):
        await repository.delete(event_id + 1)
    assert [e.id for e in await repository.list('2025-01-01T00:00')] == [event_id]

async def test_delete_with_matching_guard(repository):
    event_id = await repository.create(payload(start_time='2025-01-01T10:00:00Z'))
    await repository.delete(event_id, '2025-01-01T10:00')
    assert await repository.list('2025-01-01T00:00') == []

async def test_delete_with_mismatched_guard_is_not_found(repository):
    event_id = await repository.create(payload())
    with pytest.raises(NotFoundError):
        await repository.delete(event_id, '2025-01-01T10:01')
    assert (await repository.get(event_id)).id == event_id

async def test_delete_guard_must_be_a_timestamp(repository):
    event_id = await repository.create(payload())
    with pytest.raises(ValidationError):
        await repository.delete(event_id, 'ten o clock')
