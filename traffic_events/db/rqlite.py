"""rqlite storage backend (SQL over HTTP).

rqlite receives each statement as literal SQL text inside a JSON array:
writes are POSTed to ``/db/execute`` and reads to ``/db/query``. Parameters
are rendered into the text by the statement builder, which escapes quotes and
checks the placeholder count first.

Responses look like::

    {"results": [{"columns": [...], "types": [...], "values": [[...]]}]}
    {"results": [{"last_insert_id": 1, "rows_affected": 1}]}
    {"results": [{"error": "near \"SELEC\": syntax error"}]}
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from sqlalchemy import Table
from sqlalchemy.dialects import sqlite
from sqlalchemy.schema import CreateTable

from .base import ExecuteResult, Row, Storage, normalize_row
from .dialects import SQLITE_DIALECT
from .statements import inline_parameters
from ..config.storage import StorageConfig
from ..errors import StorageError, StorageTimeoutError

logger = logging.getLogger(__name__)

class RqliteStorage(Storage):
    """Storage backend talking to an rqlite cluster over HTTP."""

    name = 'rqlite'

    def __init__(self, base_url: str, timeout: float, client: Optional[httpx.AsyncClient] = None):
        super().__init__(SQLITE_DIALECT, timeout)
        self.base_url = base_url.rstrip('/')
        self.client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: StorageConfig) -> 'RqliteStorage':
        return cls(config.rqlite_url, config.timeout)

    async def _post(self, endpoint: str, statement: str) -> Dict[str, Any]:
        """POST one statement and return its single result entry."""
        try:
            response = await self.client.post(
                endpoint,
                json=[statement],
                headers={'Content-Type': 'application/json'},
            )
        except httpx.TimeoutException as e:
            logger.error(f"rqlite {endpoint} timed out: {e}")
            raise StorageTimeoutError(f"rqlite {endpoint} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"rqlite {endpoint} request error: {e}")
            raise StorageError(f"rqlite {endpoint} request failed: {e}") from e

        if not response.is_success:
            logger.error(f"rqlite {endpoint} failed with {response.status_code}: {response.text}")
            raise StorageError(f"rqlite {endpoint} failed: {response.status_code} {response.text}")

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise StorageError(f"rqlite {endpoint} returned malformed JSON: {e}") from e

        results = payload.get('results') if isinstance(payload, dict) else None
        if not results or not isinstance(results[0], dict):
            raise StorageError(f"Unexpected result from rqlite: {payload}")

        result = results[0]
        if result.get('error'):
            logger.error(f"rqlite {endpoint} statement error: {result['error']}")
            raise StorageError(f"rqlite statement failed: {result['error']}")
        return result

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        statement = inline_parameters(sql, params)
        logger.debug(f"Executing SQL: {statement}")
        result = await self._bounded(self._post('/db/execute', statement), 'execute')
        return ExecuteResult(
            rows_affected=int(result.get('rows_affected') or 0),
            last_insert_id=result.get('last_insert_id'),
        )

    async def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        statement = inline_parameters(sql, params)
        logger.debug(f"Querying SQL: {statement}")
        result = await self._bounded(self._post('/db/query', statement), 'query')
        columns = result.get('columns') or []
        return [normalize_row(columns, values) for values in result.get('values') or []]

    async def init_schema(self, table: Table) -> None:
        ddl = str(CreateTable(table, if_not_exists=True).compile(dialect=sqlite.dialect()))
        await self._bounded(self._post('/db/execute', ddl.strip()), 'init_schema')
        logger.info(f"rqlite schema ready (table '{table.name}')")

    async def ping(self) -> bool:
        """Check that the cluster answers on ``/status``."""
        try:
            response = await self.client.get('/status')
        except httpx.HTTPError as e:
            logger.warning(f"rqlite status check failed: {e}")
            return False
        return response.is_success

    async def close(self) -> None:
        await self.client.aclose()
