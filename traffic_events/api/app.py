"""FastAPI application configuration module."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import MetaData

# Internal imports
from traffic_events import __version__
from traffic_events.config.environment import IS_PRODUCTION_ENVIRONMENT # Environment must be imported first
from traffic_events.config.access import AccessConfig
from traffic_events.config.cors import CORS_CONFIG
from traffic_events.config.events import EventsConfig
from traffic_events.config.external_services import LLMConfig
from traffic_events.config.storage import StorageConfig
from traffic_events.db import Storage, create_storage
from traffic_events.event_repository import EventRepository
from traffic_events.models.event import build_events_table
from traffic_events.utils.llm import TextToEventAdapter
from traffic_events.utils.logging_config import setup_logging
from .error_handlers import register_error_handlers
from .routes import (
    events,
    health,
    llm
)

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

def create_application(
    storage: Optional[Storage] = None,
    events_config: Optional[EventsConfig] = None,
    access_config: Optional[AccessConfig] = None,
    text_adapter: Optional[TextToEventAdapter] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators that are not passed in are built from environment
    configuration. The storage backend is created and its schema ensured in
    the lifespan, and closed again at shutdown.
    """
    events_config = events_config or EventsConfig()
    events_config.validate()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        try:
            backend = storage or create_storage(StorageConfig())
            table = build_events_table(MetaData(), events_config.allowed_types)
            await backend.init_schema(table)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise

        app.state.storage = backend
        app.state.repository = EventRepository(backend, events_config)
        yield
        # Shutdown
        await backend.close()
        logger.info("Storage connections closed")

    app = FastAPI(
        title="Traffic Events API",
        description="API for recording and serving geo-tagged traffic incidents",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    app.state.access_config = access_config or AccessConfig()
    app.state.text_adapter = text_adapter or TextToEventAdapter(
        LLMConfig(), statuses=events_config.allowed_types
    )

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its client address, status and duration."""
        started = time.perf_counter()
        client = request.client.host if request.client else 'unknown'
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} - IP: {client} - "
            f"{response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response

    register_error_handlers(app)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api")
    app.include_router(llm.router, prefix="/api")

    return app

# Create the application instance
app = create_application()
