"""Database package initialization.

This module exposes the public interface of the storage layer.
"""

from .base import ExecuteResult, Row, Storage, normalize_row, normalize_value
from .db_core import create_storage
from .dialects import SqlDialect, get_dialect
from .rqlite import RqliteStorage
from .sql_storage import PooledStorage, SQLAlchemyStorage, SQLiteStorage
from .statements import inline_parameters, render_literal, to_named_parameters

__all__ = [
    # Interface
    'Storage',
    'ExecuteResult',
    'Row',
    'SqlDialect',

    # Backends
    'SQLAlchemyStorage',
    'SQLiteStorage',
    'PooledStorage',
    'RqliteStorage',

    # Construction
    'create_storage',
    'get_dialect',

    # Utilities
    'inline_parameters',
    'render_literal',
    'to_named_parameters',
    'normalize_row',
    'normalize_value',
]
