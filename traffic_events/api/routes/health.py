"""Health check routes for the FastAPI application."""

from fastapi import APIRouter, Request

from traffic_events import __version__
from traffic_events.config.environment import IS_PRODUCTION_ENVIRONMENT

router = APIRouter(tags=["health"])

@router.get("/")
async def health_check(request: Request):
    """Health check endpoint."""
    storage = getattr(request.app.state, 'storage', None)
    return {
        "status": "healthy",
        "environment": "production" if IS_PRODUCTION_ENVIRONMENT else "development",
        "version": __version__,
        "storage": storage.name if storage else None
    }
