"""Routes package initialization."""

from . import (
    events,
    health,
    llm
)

__all__ = [
    'events',
    'health',
    'llm'
]
