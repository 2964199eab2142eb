"""Shared API key configuration for mutating endpoints."""

import hmac
import os
from dataclasses import dataclass
from typing import Optional

from ..errors import AuthenticationError, ForbiddenError, ServerConfigurationError

@dataclass
class AccessConfig:
    """Access configuration settings."""

    api_key: str = ""

    def __post_init__(self):
        """Load API key from environment if not provided."""
        if not self.api_key:
            self.api_key = os.environ.get('API_KEY', '')

    def verify(self, provided_key: Optional[str]) -> None:
        """Check a caller-supplied key against the configured secret.

        Raises:
            ServerConfigurationError: If no API key is configured
            AuthenticationError: If the caller did not supply a key
            ForbiddenError: If the supplied key does not match
        """
        if not self.api_key:
            raise ServerConfigurationError("Server configuration error: API key not set")
        if not provided_key:
            raise AuthenticationError("API key required")
        if not hmac.compare_digest(provided_key.encode(), self.api_key.encode()):
            raise ForbiddenError("Invalid API key")
