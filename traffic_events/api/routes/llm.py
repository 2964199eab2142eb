"""Routes for turning free text into events with the language model."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from ..dependencies import get_repository, get_text_adapter, require_api_key
from ...errors import ValidationError
from ...event_repository import EventRepository
from ...utils.llm import TextToEventAdapter

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/llm",
    tags=["llm"],
    dependencies=[Depends(require_api_key)]
)

def _prompt_from(payload: Any) -> str:
    prompt = payload.get('prompt') if isinstance(payload, dict) else None
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("prompt is required")
    return prompt.strip()

@router.post("")
async def convert_text(
    payload: Any = Body(None),
    adapter: TextToEventAdapter = Depends(get_text_adapter)
):
    """Return the candidate event the model extracts from ``prompt``."""
    prompt = _prompt_from(payload)
    return await adapter.convert(prompt)

@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event_from_text(
    payload: Any = Body(None),
    adapter: TextToEventAdapter = Depends(get_text_adapter),
    repository: EventRepository = Depends(get_repository)
):
    """Convert ``prompt`` into an event and store it through the normal create path."""
    prompt = _prompt_from(payload)
    candidate = await adapter.convert(prompt)
    event_id = await repository.create(candidate)
    logger.info(f"Created event {event_id} from free text")
    return {
        "id": event_id,
        "message": "Event created successfully",
        "event": candidate
    }
