"""Models package initialization."""

from .event import Event, NewEvent, build_events_table

__all__ = ['Event', 'NewEvent', 'build_events_table']
