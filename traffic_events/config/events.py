"""Event type and listing configuration."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .environment import env_flag

DEFAULT_EVENT_TYPES = ('active', 'inactive')

@dataclass
class EventsConfig:
    """Deployment-specific event settings.

    Fields:
        allowed_types: Permitted values for the event ``type`` column.
                       Loaded from EVENT_TYPES (comma separated) when empty.
                       Another common deployment uses
                       ``warning,slow traffic,very slow traffic,normal``.
        require_start_time: Whether listing requires a ``start_time`` bound.
                            When false, an unbounded listing returns the
                            currently active events instead.
    """

    allowed_types: Tuple[str, ...] = field(default_factory=tuple)
    require_start_time: Optional[bool] = None

    def __post_init__(self):
        """Load unset values from the environment."""
        if not self.allowed_types:
            configured = os.environ.get('EVENT_TYPES', '')
            types = tuple(t.strip() for t in configured.split(',') if t.strip())
            self.allowed_types = types or DEFAULT_EVENT_TYPES
        else:
            self.allowed_types = tuple(self.allowed_types)
        if self.require_start_time is None:
            self.require_start_time = env_flag('EVENTS_REQUIRE_START_TIME', True)

    def validate(self) -> bool:
        """Validate the configuration."""
        if len(set(self.allowed_types)) != len(self.allowed_types):
            raise ValueError("EVENT_TYPES must not contain duplicates")
        if any(len(t) > 32 for t in self.allowed_types):
            raise ValueError("EVENT_TYPES values must be at most 32 characters")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            'allowed_types': list(self.allowed_types),
            'require_start_time': self.require_start_time,
        }
