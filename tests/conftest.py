"""Shared fixtures for the test suite."""

from typing import Any, List, Sequence, Tuple

import pytest
from sqlalchemy import MetaData, Table

from traffic_events.config.events import EventsConfig
from traffic_events.config.storage import StorageConfig
from traffic_events.db.base import ExecuteResult, Row, Storage
from traffic_events.db.dialects import SQLITE_DIALECT
from traffic_events.db.sql_storage import SQLiteStorage
from traffic_events.event_repository import EventRepository
from traffic_events.models.event import build_events_table

ALLOWED_TYPES = ('active', 'inactive')

class RecordingStorage(Storage):
    """In-memory stand-in that records every statement it receives."""

    name = 'recording'

    def __init__(self, rows: List[Row] = None, result: ExecuteResult = None):
        super().__init__(SQLITE_DIALECT, timeout=1)
        self.rows = rows or []
        self.result = result or ExecuteResult(rows_affected=1, last_insert_id=1)
        self.calls: List[Tuple[str, str, Sequence[Any]]] = []

    async def execute(self, sql, params=()):
        self.calls.append(('execute', sql, list(params)))
        return self.result

    async def query(self, sql, params=()):
        self.calls.append(('query', sql, list(params)))
        return self.rows

    async def init_schema(self, table: Table) -> None:
        self.calls.append(('init_schema', table.name, []))

@pytest.fixture
def events_config() -> EventsConfig:
    return EventsConfig(allowed_types=ALLOWED_TYPES, require_start_time=True)

@pytest.fixture
def events_table() -> Table:
    return build_events_table(MetaData(), ALLOWED_TYPES)

@pytest.fixture
def storage_config(tmp_path) -> StorageConfig:
    return StorageConfig(backend='sqlite', sqlite_path=tmp_path / 'events.db', timeout=5)

@pytest.fixture
async def sqlite_storage(storage_config, events_table):
    storage = SQLiteStorage.from_config(storage_config)
    await storage.init_schema(events_table)
    yield storage
    await storage.close()

@pytest.fixture
def repository(sqlite_storage, events_config) -> EventRepository:
    return EventRepository(sqlite_storage, events_config)

@pytest.fixture
def recording_storage() -> RecordingStorage:
    return RecordingStorage()
