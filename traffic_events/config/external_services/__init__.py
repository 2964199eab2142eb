"""External service configurations."""

from .llm import (
    LLMConfig,
    init_llm_client
)

__all__ = [
    'LLMConfig',
    'init_llm_client'
]
