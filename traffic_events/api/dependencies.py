"""Shared FastAPI dependencies."""

from typing import Optional

from fastapi import Header, Query, Request

from ..config.access import AccessConfig
from ..event_repository import EventRepository
from ..utils.llm import TextToEventAdapter

def get_repository(request: Request) -> EventRepository:
    """Event repository built at startup."""
    return request.app.state.repository

def get_text_adapter(request: Request) -> TextToEventAdapter:
    """Text-to-event adapter built at startup."""
    return request.app.state.text_adapter

async def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(None, alias="x-api-key"),
    api_key: Optional[str] = Query(None)
) -> None:
    """
    Guard for mutating endpoints.

    The key is read from the ``x-api-key`` header, falling back to the
    ``api_key`` query parameter, and compared with the configured secret.
    """
    access_config: AccessConfig = request.app.state.access_config
    access_config.verify(x_api_key or api_key)
