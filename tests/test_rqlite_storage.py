"""Tests for the rqlite backend, using httpx's mock transport."""

import json

import httpx
import pytest

from traffic_events.db.rqlite import RqliteStorage
from traffic_events.errors import StatementError, StorageError, StorageTimeoutError

BASE_URL = "http://rqlite.test:4001"

def build_storage(handler, timeout: float = 5) -> RqliteStorage:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return RqliteStorage(BASE_URL, timeout, client=client)

class Recorder:
    """Mock transport handler returning a canned JSON reply and recording requests."""

    def __init__(self, reply, status_code=200):
        self.reply = reply
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.reply, (dict, list)):
            return httpx.Response(self.status_code, json=self.reply)
        return httpx.Response(self.status_code, text=self.reply)

    @property
    def statements(self):
        return [json.loads(r.content) for r in self.requests]

async def test_query_posts_inlined_statement_and_normalizes_rows():
    recorder = Recorder({
        'results': [{
            'columns': ['id', 'latitude', 'note'],
            'types': ['integer', 'real', 'text'],
            'values': [[2, 17.42, "it's busy"], [1, 17.41, None]],
        }]
    })
    storage = build_storage(recorder)

    rows = await storage.query("SELECT id, latitude, note FROM events WHERE note <> ?", ["it's"])

    assert rows == [
        {'id': 2, 'latitude': 17.42, 'note': "it's busy"},
        {'id': 1, 'latitude': 17.41, 'note': None},
    ]
    assert recorder.requests[0].url.path == '/db/query'
    assert recorder.statements == [["SELECT id, latitude, note FROM events WHERE note <> 'it''s'"]]
    await storage.close()

async def test_query_without_values_returns_empty_list():
    storage = build_storage(Recorder({'results': [{'columns': ['id'], 'types': ['integer']}]}))
    assert await storage.query("SELECT id FROM events") == []
    await storage.close()

async def test_execute_reports_rows_affected_and_last_insert_id():
    recorder = Recorder({'results': [{'last_insert_id': 7, 'rows_affected': 1}]})
    storage = build_storage(recorder)

    result = await storage.execute("DELETE FROM events WHERE id = ?", [7])

    assert result.rows_affected == 1
    assert result.last_insert_id == 7
    assert recorder.requests[0].url.path == '/db/execute'
    assert recorder.statements == [["DELETE FROM events WHERE id = 7"]]
    await storage.close()

async def test_execute_without_rows_affected_counts_zero():
    storage = build_storage(Recorder({'results': [{}]}))
    result = await storage.execute("DELETE FROM events WHERE id = ?", [99])
    assert result.rows_affected == 0
    await storage.close()

async def test_statement_error_in_results_raises_storage_error():
    storage = build_storage(Recorder({'results': [{'error': 'no such table: events'}]}))
    with pytest.raises(StorageError, match='no such table'):
        await storage.query("SELECT * FROM events")
    await storage.close()

async def test_non_2xx_status_raises_storage_error():
    storage = build_storage(Recorder('leader not found', status_code=503))
    with pytest.raises(StorageError, match='leader not found'):
        await storage.execute("DELETE FROM events")
    await storage.close()

async def test_malformed_json_raises_storage_error():
    storage = build_storage(Recorder('<html>not json</html>'))
    with pytest.raises(StorageError, match='malformed JSON'):
        await storage.query("SELECT 1")
    await storage.close()

async def test_missing_results_raises_storage_error():
    storage = build_storage(Recorder({'unexpected': True}))
    with pytest.raises(StorageError, match='Unexpected result'):
        await storage.query("SELECT 1")
    await storage.close()

async def test_connection_error_raises_storage_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    storage = build_storage(refuse)
    with pytest.raises(StorageError, match='connection refused'):
        await storage.query("SELECT 1")
    await storage.close()

async def test_transport_timeout_raises_storage_timeout():
    def hang(request):
        raise httpx.ReadTimeout("timed out", request=request)

    storage = build_storage(hang)
    with pytest.raises(StorageTimeoutError):
        await storage.query("SELECT 1")
    await storage.close()

async def test_placeholder_mismatch_never_sends_request():
    recorder = Recorder({'results': [{}]})
    storage = build_storage(recorder)
    with pytest.raises(StatementError):
        await storage.execute("DELETE FROM events WHERE id = ?", [])
    assert recorder.requests == []
    await storage.close()

async def test_init_schema_sends_create_table_if_not_exists(events_table):
    recorder = Recorder({'results': [{}]})
    storage = build_storage(recorder)

    await storage.init_schema(events_table)

    [[ddl]] = recorder.statements
    assert ddl.startswith('CREATE TABLE IF NOT EXISTS events')
    assert "type IN ('active', 'inactive')" in ddl
    await storage.close()

async def test_ping_checks_status_endpoint():
    recorder = Recorder({'store': {}})
    storage = build_storage(recorder)
    assert await storage.ping() is True
    assert recorder.requests[0].url.path == '/status'
    await storage.close()
