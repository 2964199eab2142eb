"""Exceptions shared by the repository, storage backends and API layer.

Each exception carries the HTTP status the API answers with. Storage and
adapter errors keep the raw upstream message for logging; callers only ever
see ``public_message``.
"""

from typing import Optional

class TrafficEventsError(Exception):
    """Base exception for all application errors."""

    status_code = 500
    default_message = "Internal server error"
    expose_message = False

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def public_message(self) -> str:
        """Message that is safe to return to API callers."""
        return self.message if self.expose_message else self.default_message

class ValidationError(TrafficEventsError):
    """Raised when a request field is missing or invalid."""

    status_code = 400
    default_message = "Invalid request"
    expose_message = True

class NotFoundError(TrafficEventsError):
    """Raised when no event matches the requested id (and guard)."""

    status_code = 404
    default_message = "Event not found"

class AuthError(TrafficEventsError):
    """Base exception for shared key checks."""

    expose_message = True

class AuthenticationError(AuthError):
    """Raised when the caller supplied no API key."""

    status_code = 401
    default_message = "API key required"

class ForbiddenError(AuthError):
    """Raised when the supplied API key does not match."""

    status_code = 403
    default_message = "Invalid API key"

class ServerConfigurationError(AuthError):
    """Raised when no API key is configured on the server."""

    default_message = "Server configuration error: API key not set"

class StorageError(TrafficEventsError):
    """Raised when a storage backend call fails."""

class StatementError(StorageError):
    """Raised when a statement cannot be built from its parameters."""

class StorageTimeoutError(StorageError):
    """Raised when a storage backend call exceeds its timeout."""

    status_code = 504
    default_message = "Storage backend timed out"

class AdapterError(TrafficEventsError):
    """Raised when free text cannot be turned into an event."""

    default_message = "Failed to call LLM service"

class AdapterConfigurationError(AdapterError):
    """Raised when no LLM credential is configured."""

class AdapterTimeoutError(AdapterError):
    """Raised when the LLM call exceeds its timeout."""

    status_code = 504
    default_message = "LLM service timed out"
