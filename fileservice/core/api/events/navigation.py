"""
Navigation events fired around every request.

'navigating' fires right before a request is sent, 'navigated' right after
a response is obtained. Both are informational only.
"""
from dataclasses import dataclass
from typing import Protocol

NAVIGATING = 'navigating'
NAVIGATED = 'navigated'


@dataclass(frozen=True)
class NavigatingEvent:
    """Payload of the 'navigating' event."""
    resource_id: int
    uri: str
    method: str


@dataclass(frozen=True)
class NavigatedEvent:
    """Payload of the 'navigated' event."""
    resource_id: int
    method: str
    uri: str
    status_code: int
    reason: str = ''


class NavigationListener(Protocol):
    """Observer interface for request instrumentation."""
    
    def on_navigating(self, event: NavigatingEvent) -> None: ...
    def on_navigated(self, event: NavigatedEvent) -> None: ...
