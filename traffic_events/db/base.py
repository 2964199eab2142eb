"""Storage adapter interface.

Every backend accepts statements with positional ``?`` placeholders and
returns rows in one normalized shape: an ordered ``dict`` mapping column name
to a scalar (``str``, ``int``, ``float`` or ``None``). This is the seam that
makes the backends interchangeable behind the event repository.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from sqlalchemy import Table

from .dialects import SqlDialect
from ..errors import StorageError, StorageTimeoutError

logger = logging.getLogger(__name__)

Scalar = Union[str, int, float, None]
Row = Dict[str, Scalar]

T = TypeVar('T')

@dataclass
class ExecuteResult:
    """Outcome of a write statement."""
    rows_affected: int = 0
    last_insert_id: Optional[int] = None

def normalize_value(value: Any) -> Scalar:
    """Coerce a driver value into one of the normalized scalar types."""
    if value is None or isinstance(value, (str, int, float)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.strftime('%Y-%m-%d %H:%M:%S')
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)

def normalize_row(columns: Iterable[str], values: Iterable[Any]) -> Row:
    """Zip column names and values into a normalized row."""
    return {name: normalize_value(value) for name, value in zip(columns, values)}

class Storage(ABC):
    """
    Base interface for all storage backends.

    Each backend is responsible for:
    1. Sending statements over its own transport
    2. Converting its native result shape into normalized rows
    3. Surfacing any transport failure as a StorageError
    """

    #: Name used in logs and the health endpoint
    name: str = 'storage'

    def __init__(self, dialect: SqlDialect, timeout: float):
        self.dialect = dialect
        self.timeout = timeout

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        """Run a write statement and report affected rows and the new row id."""

    @abstractmethod
    async def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        """Run a read statement and return normalized rows."""

    @abstractmethod
    async def init_schema(self, table: Table) -> None:
        """Create ``table`` if it does not exist yet."""

    async def close(self) -> None:
        """Release connections held by the backend."""

    async def _bounded(self, operation: Awaitable[T], description: str) -> T:
        """Await ``operation`` under the configured timeout."""
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{self.name} {description} timed out after {self.timeout}s")
            raise StorageTimeoutError(
                f"{self.name} {description} timed out after {self.timeout}s"
            ) from None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect.name!r})"

__all__ = [
    'ExecuteResult',
    'Row',
    'Scalar',
    'Storage',
    'StorageError',
    'normalize_row',
    'normalize_value',
]
