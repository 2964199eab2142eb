"""Text-to-event adapter backed by an OpenAI-compatible chat model.

This module turns a free-text incident description into a candidate event
record. The candidate is an ordinary create payload: the event repository
validates and stores it like any other request body.
"""

import json
import logging
from typing import Any, Dict, Iterable, Optional

import openai
from openai import AsyncOpenAI

from ..config.external_services.llm import LLMConfig, init_llm_client
from ..errors import AdapterConfigurationError, AdapterError, AdapterTimeoutError
from .timeutils import format_storage, hours_after, utc_now

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('latitude', 'longitude', 'status')

def _extract_json_from_response(response_text: str) -> Optional[Dict[str, Any]]:
    """Extract JSON from a response that might be wrapped in markdown code blocks."""
    # First try parsing as-is
    try:
        result = json.loads(response_text)
        return result if isinstance(result, dict) else None
    except json.JSONDecodeError:
        pass

    # Try extracting from markdown code block
    if "```" in response_text:
        try:
            start = response_text.find("```") + 3
            end = response_text.rfind("```")
            # Skip language identifier if present
            if "json" in response_text[start:start+10]:
                start = response_text.find("\n", start) + 1
            result = json.loads(response_text[start:end].strip())
            return result if isinstance(result, dict) else None
        except (json.JSONDecodeError, ValueError):
            pass

    return None

def _system_prompt(statuses: Iterable[str]) -> str:
    return (
        "You are a helpful assistant that converts traffic incident reports into structured data. "
        "Identify the location described in the report and estimate its coordinates. "
        "Respond only with a valid JSON object containing:\n"
        "- 'latitude': latitude of the incident as a number\n"
        "- 'longitude': longitude of the incident as a number\n"
        f"- 'status': one of {', '.join(repr(s) for s in statuses)}"
    )

class TextToEventAdapter:
    """Converts free text into a candidate event record."""

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        statuses: Iterable[str] = ('active', 'inactive'),
        client: Optional[AsyncOpenAI] = None
    ):
        self.config = config or LLMConfig()
        self.statuses = tuple(statuses)
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = init_llm_client(self.config)
            except ValueError as e:
                raise AdapterConfigurationError(str(e)) from e
        return self._client

    async def convert(self, text: str) -> Dict[str, Any]:
        """
        Ask the model for the location and status described by ``text``.

        Args:
            text: Free-text incident description

        Returns:
            Dictionary with latitude, longitude, status, start_time, end_time
            and note. The time window starts now and lasts the configured
            number of hours; note is the original text.

        Raises:
            AdapterConfigurationError: If no LLM key is configured
            AdapterTimeoutError: If the upstream call times out
            AdapterError: If the call fails or the reply is unusable
        """
        client = self._get_client()
        called_at = utc_now()

        try:
            response = await client.chat.completions.create(
                model=self.config.model,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                messages=[
                    {"role": "system", "content": _system_prompt(self.statuses)},
                    {"role": "user", "content": text},
                ]
            )
        except openai.APITimeoutError as e:
            logger.error(f"LLM call timed out: {e}")
            raise AdapterTimeoutError(f"LLM call timed out: {e}") from e
        except openai.OpenAIError as e:
            logger.error(f"Error calling LLM API: {e}")
            raise AdapterError(f"LLM call failed: {e}") from e

        try:
            response_text = (response.choices[0].message.content or '').strip()
        except (AttributeError, IndexError) as e:
            raise AdapterError(f"LLM reply has no message content: {e}") from e

        result = _extract_json_from_response(response_text)
        if result is None:
            logger.error(f"Invalid response format: {response_text}")
            raise AdapterError("LLM reply is not a JSON object")

        missing = [name for name in REQUIRED_FIELDS if result.get(name) is None]
        if missing:
            logger.error(f"LLM reply missing fields {missing}: {response_text}")
            raise AdapterError(f"LLM reply is missing required fields: {', '.join(missing)}")

        return {
            'latitude': result['latitude'],
            'longitude': result['longitude'],
            'status': result['status'],
            'start_time': format_storage(called_at),
            'end_time': format_storage(hours_after(called_at, self.config.event_duration_hours)),
            'note': text,
        }
