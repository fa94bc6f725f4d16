"""Event emitter and navigation events."""
from .event_emitter import EventEmitter
from .navigation import (
    NAVIGATING,
    NAVIGATED,
    NavigatingEvent,
    NavigatedEvent,
    NavigationListener
)

__all__ = [
    'EventEmitter',
    'NAVIGATING',
    'NAVIGATED',
    'NavigatingEvent',
    'NavigatedEvent',
    'NavigationListener',
]
