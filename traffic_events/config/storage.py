"""Storage backend configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy.engine import URL

from .environment import env_flag

SQLITE = 'sqlite'
RQLITE = 'rqlite'
POOL = 'pool'

BACKENDS = (SQLITE, RQLITE, POOL)

DEFAULT_SQLITE_PATH = Path(__file__).parent.parent.parent / 'data' / 'events.db'

# Async drivers used for the pooled backend, keyed by DB_DRIVER
POOL_DRIVERS = {
    'mysql': 'mysql+aiomysql',
    'postgresql': 'postgresql+psycopg',
}

@dataclass
class StorageConfig:
    """Storage configuration settings.

    Empty fields are filled from environment variables:

        STORAGE_BACKEND   sqlite (default), rqlite or pool
        SQLITE_PATH       database file for the sqlite backend
        RQLITE_URL        base URL of the rqlite cluster
        DATABASE_URL      SQLAlchemy URL for the pool backend; when absent it is
                          assembled from DB_DRIVER, DB_HOST, DB_PORT, DB_USER,
                          DB_PASSWORD and DB_NAME
        DB_POOL_SIZE      concurrent connections for the pool backend
        DB_POOL_TIMEOUT   seconds a request may queue for a pooled connection
        STORAGE_TIMEOUT   seconds before a single storage call is abandoned
        DB_ECHO           echo SQL statements
    """

    backend: str = ""
    sqlite_path: Optional[Path] = None
    rqlite_url: str = ""
    database_url: str = ""
    pool_size: int = 0
    pool_timeout: float = 0
    pool_recycle: int = 3600
    pool_pre_ping: bool = True
    timeout: float = 0
    echo: Optional[bool] = None
    connect_args: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Load unset values from the environment."""
        if not self.backend:
            self.backend = os.environ.get('STORAGE_BACKEND', SQLITE).strip().lower()
        if self.sqlite_path is None:
            configured = os.environ.get('SQLITE_PATH')
            self.sqlite_path = Path(configured) if configured else DEFAULT_SQLITE_PATH
        if not self.rqlite_url:
            self.rqlite_url = os.environ.get('RQLITE_URL', 'http://localhost:4001')
        if not self.database_url:
            self.database_url = os.environ.get('DATABASE_URL') or self._url_from_parts()
        if not self.pool_size:
            self.pool_size = int(os.environ.get('DB_POOL_SIZE', '10'))
        if not self.pool_timeout:
            self.pool_timeout = float(os.environ.get('DB_POOL_TIMEOUT', '30'))
        if not self.timeout:
            self.timeout = float(os.environ.get('STORAGE_TIMEOUT', '10'))
        if self.echo is None:
            self.echo = env_flag('DB_ECHO', False)

    @staticmethod
    def _url_from_parts() -> str:
        """Assemble a pool URL from the individual DB_* variables."""
        driver = os.environ.get('DB_DRIVER', 'mysql').strip().lower()
        if driver not in POOL_DRIVERS:
            return ""
        default_port = '3306' if driver == 'mysql' else '5432'
        url = URL.create(
            POOL_DRIVERS[driver],
            username=os.environ.get('DB_USER', 'root'),
            password=os.environ.get('DB_PASSWORD') or None,
            host=os.environ.get('DB_HOST', 'localhost'),
            port=int(os.environ.get('DB_PORT', default_port)),
            database=os.environ.get('DB_NAME', 'traffic'),
        )
        return url.render_as_string(hide_password=False)

    @property
    def sqlite_url(self) -> str:
        """SQLAlchemy URL for the embedded file backend."""
        return f"sqlite+aiosqlite:///{self.sqlite_path}"

    def validate(self) -> bool:
        """Validate the configuration."""
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Invalid STORAGE_BACKEND '{self.backend}'. Must be one of: {', '.join(BACKENDS)}"
            )
        if self.backend == POOL and not self.database_url:
            raise ValueError("DATABASE_URL (or DB_DRIVER mysql/postgresql) is required for the pool backend")
        if self.pool_size < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if self.timeout <= 0:
            raise ValueError("STORAGE_TIMEOUT must be positive")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format, without credentials."""
        return {
            'backend': self.backend,
            'sqlite_path': str(self.sqlite_path),
            'rqlite_url': self.rqlite_url,
            'pool_size': self.pool_size,
            'pool_timeout': self.pool_timeout,
            'timeout': self.timeout,
        }
