"""Events router module."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ..dependencies import get_repository, require_api_key
from ...event_repository import EventRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])

# Ids are stored as signed 64-bit integers on every backend
MAX_EVENT_ID = 2**63 - 1

@router.get("/events", response_model=List[Dict])
async def list_events(
    start_time: Optional[str] = Query(None),
    end_time: Optional[str] = Query(None),
    repository: EventRepository = Depends(get_repository)
):
    """List events whose start time falls in the requested window, newest first."""
    events = await repository.list(start_time, end_time)
    return [event.to_dict() for event in events]

@router.get("/events/{event_id}", response_model=Dict)
async def get_event(
    event_id: int = Path(..., ge=-MAX_EVENT_ID - 1, le=MAX_EVENT_ID),
    repository: EventRepository = Depends(get_repository)
):
    """Get a single event by ID."""
    event = await repository.get(event_id)
    return event.to_dict()

@router.post(
    "/events",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_api_key)]
)
async def create_event(
    payload: Any = Body(None),
    repository: EventRepository = Depends(get_repository)
):
    """
    Create an event.

    Body fields: latitude (or lat), longitude (or long), type, and optionally
    start_time, end_time and note.

    FastAPI decodes the body before running the API key dependency, so a
    malformed JSON body is answered with 400 even without a key. Nothing is
    written in that case.
    """
    event_id = await repository.create(payload)
    return {
        "id": event_id,
        "message": "Event created successfully"
    }

@router.delete("/events/{event_id}", dependencies=[Depends(require_api_key)])
async def delete_event(
    event_id: int = Path(..., ge=-MAX_EVENT_ID - 1, le=MAX_EVENT_ID),
    payload: Any = Body(None),
    start_time: Optional[str] = Query(None),
    repository: EventRepository = Depends(get_repository)
):
    """
    Delete an event by ID.

    An optional ``start_time`` (JSON body or query string) must match the
    stored start time as well for the delete to go through. As with create,
    a malformed JSON body is rejected with 400 before the API key is checked.
    """
    guard = start_time
    if isinstance(payload, dict) and payload.get('start_time') is not None:
        guard = payload['start_time']
    await repository.delete(event_id, guard)
    return {"message": "Event deleted successfully"}
