"""SQLAlchemy-backed storage: the embedded SQLite file and the pooled server.

Both run statements through an async engine with real bound parameters.
They differ only in how the engine is configured: the embedded backend opens
a local file through aiosqlite, the pooled backend keeps a bounded pool of
server connections (MySQL through aiomysql, PostgreSQL through psycopg) and
queues requests once every connection is in use.
"""

import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy import Table, text
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .base import ExecuteResult, Row, Storage, normalize_row
from .dialects import get_dialect
from .statements import to_named_parameters
from ..config.storage import StorageConfig
from ..errors import StorageError, StorageTimeoutError

logger = logging.getLogger(__name__)

class SQLAlchemyStorage(Storage):
    """Storage backend running statements through a SQLAlchemy async engine."""

    name = 'sql'

    def __init__(self, engine: AsyncEngine, timeout: float):
        super().__init__(get_dialect(engine.dialect.name), timeout)
        self.engine = engine

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        named_sql, bound = to_named_parameters(sql, params)
        logger.debug(f"Executing SQL: {named_sql} params={bound}")
        return await self._bounded(self._execute(named_sql, bound), 'execute')

    async def _execute(self, sql: str, bound: Dict[str, Any]) -> ExecuteResult:
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(sql), bound)
                last_insert_id = None
                if not self.dialect.insert_returning and sql.lstrip().upper().startswith('INSERT'):
                    last_insert_id = result.lastrowid
                return ExecuteResult(
                    rows_affected=max(result.rowcount, 0),
                    last_insert_id=last_insert_id,
                )
        except PoolTimeoutError as e:
            raise StorageTimeoutError(f"{self.name} connection pool exhausted: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"{self.name} execute error: {e}")
            raise StorageError(f"{self.name} execute failed: {e}") from e

    async def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        named_sql, bound = to_named_parameters(sql, params)
        logger.debug(f"Querying SQL: {named_sql} params={bound}")
        return await self._bounded(self._query(named_sql, bound), 'query')

    async def _query(self, sql: str, bound: Dict[str, Any]) -> List[Row]:
        try:
            # begin() so that INSERT ... RETURNING is committed as well
            async with self.engine.begin() as conn:
                result = await conn.execute(text(sql), bound)
                columns = list(result.keys())
                return [normalize_row(columns, row) for row in result.all()]
        except PoolTimeoutError as e:
            raise StorageTimeoutError(f"{self.name} connection pool exhausted: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"{self.name} query error: {e}")
            raise StorageError(f"{self.name} query failed: {e}") from e

    async def init_schema(self, table: Table) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(table.metadata.create_all, tables=[table])
            logger.info(f"{self.name} schema ready (table '{table.name}')")
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize {self.name} schema: {e}") from e

    async def close(self) -> None:
        await self.engine.dispose()

class SQLiteStorage(SQLAlchemyStorage):
    """Embedded file backend (SQLite through aiosqlite)."""

    name = 'sqlite'

    @classmethod
    def from_config(cls, config: StorageConfig) -> 'SQLiteStorage':
        config.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(config.sqlite_url, echo=config.echo)
        return cls(engine, config.timeout)

class PooledStorage(SQLAlchemyStorage):
    """Relational server backend with a bounded connection pool."""

    name = 'pool'

    @classmethod
    def from_config(cls, config: StorageConfig) -> 'PooledStorage':
        engine = create_async_engine(
            config.database_url,
            echo=config.echo,
            pool_size=config.pool_size,
            # Requests beyond pool_size wait for a free connection instead of opening more
            max_overflow=0,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=config.pool_pre_ping,
            connect_args=config.connect_args,
        )
        return cls(engine, config.timeout)
