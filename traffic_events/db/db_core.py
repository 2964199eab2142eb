"""Storage construction.

The storage backend is built once at process start (see the FastAPI
lifespan in ``traffic_events.api.app``), handed to the event repository and
closed at shutdown.
"""

import logging
from typing import Optional

from .base import Storage
from .rqlite import RqliteStorage
from .sql_storage import PooledStorage, SQLiteStorage
from ..config.storage import POOL, RQLITE, SQLITE, StorageConfig
from ..errors import StorageError

logger = logging.getLogger(__name__)

BACKEND_CLASSES = {
    SQLITE: SQLiteStorage,
    RQLITE: RqliteStorage,
    POOL: PooledStorage,
}

def create_storage(config: Optional[StorageConfig] = None) -> Storage:
    """
    Create the storage backend selected by the configuration.

    Args:
        config: Storage settings. Defaults to values from the environment.

    Raises:
        ValueError: If the configuration is invalid
        StorageError: If the backend cannot be constructed
    """
    config = config or StorageConfig()
    config.validate()

    try:
        storage = BACKEND_CLASSES[config.backend].from_config(config)
    except (ImportError, ValueError) as e:
        raise StorageError(f"Failed to create {config.backend} storage: {e}") from e

    logger.info(f"Using {config.backend} storage ({storage.dialect.name} dialect)")
    return storage
