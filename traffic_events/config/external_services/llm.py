"""Language model service configuration.

Any OpenAI-compatible chat-completions endpoint works; the defaults point at
the Krutrim cloud.
"""

import os
from typing import Dict, Any, Optional
from dataclasses import dataclass

from openai import AsyncOpenAI

@dataclass
class LLMConfig:
    """LLM configuration settings."""

    # API configuration
    api_key: str = ""
    base_url: str = ""
    model: str = ""
    temperature: float = 0.0
    max_tokens: int = 300
    timeout: float = 30.0

    # Default length of an event created from free text
    event_duration_hours: Optional[float] = None

    def __post_init__(self):
        """Load unset values from the environment."""
        if not self.api_key:
            self.api_key = os.environ.get('LLM_KEY', '')
        if not self.base_url:
            self.base_url = os.environ.get('LLM_BASE_URL', 'https://cloud.olakrutrim.com/v1')
        if not self.model:
            self.model = os.environ.get('LLM_MODEL', 'Krutrim-spectre-v2')
        if 'LLM_TEMPERATURE' in os.environ:
            self.temperature = float(os.environ['LLM_TEMPERATURE'])
        if 'LLM_MAX_TOKENS' in os.environ:
            self.max_tokens = int(os.environ['LLM_MAX_TOKENS'])
        if 'LLM_TIMEOUT' in os.environ:
            self.timeout = float(os.environ['LLM_TIMEOUT'])
        if self.event_duration_hours is None:
            self.event_duration_hours = float(os.environ.get('LLM_EVENT_DURATION_HOURS', '2'))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format, without credentials."""
        return {
            'base_url': self.base_url,
            'model': self.model,
            'temperature': self.temperature,
            'max_tokens': self.max_tokens,
            'timeout': self.timeout,
            'event_duration_hours': self.event_duration_hours,
        }

    def validate(self) -> bool:
        """Validate the configuration."""
        if not self.api_key:
            raise ValueError("LLM_KEY environment variable is not set")
        return True

def init_llm_client(config: LLMConfig) -> AsyncOpenAI:
    """Create an async client for the configured endpoint.

    Raises:
        ValueError: If LLM_KEY is not set
    """
    config.validate()
    return AsyncOpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout,
        max_retries=0,
    )
