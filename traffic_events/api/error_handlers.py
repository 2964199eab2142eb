"""Translate application exceptions into JSON error responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..errors import (
    AdapterError,
    AuthError,
    StorageError,
    TrafficEventsError,
)

logger = logging.getLogger(__name__)

async def handle_application_error(request: Request, exc: TrafficEventsError) -> JSONResponse:
    """Answer with the error's status and public message."""
    if isinstance(exc, (StorageError, AdapterError)):
        # Upstream detail stays in the logs
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    elif isinstance(exc, AuthError):
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    elif exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies and parameters as bad requests."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = '.'.join(str(part) for part in first.get('loc', ()) if part != 'body')
        message = f"Invalid {location}: {first.get('msg')}" if location else first.get('msg')
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})

def register_error_handlers(app: FastAPI) -> None:
    """Attach the exception handlers to ``app``."""
    app.add_exception_handler(TrafficEventsError, handle_application_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
