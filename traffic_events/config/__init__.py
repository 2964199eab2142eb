"""Application configuration.

``environment`` is imported first so the .env file is loaded before any
other configuration reads the environment.
"""

from .environment import IS_PRODUCTION_ENVIRONMENT
from .storage import StorageConfig
from .events import EventsConfig
from .access import AccessConfig
from .external_services import LLMConfig

__all__ = [
    'IS_PRODUCTION_ENVIRONMENT',
    'StorageConfig',
    'EventsConfig',
    'AccessConfig',
    'LLMConfig',
]
