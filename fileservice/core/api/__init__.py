"""File service API module: configuration, transport, events and errors."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig
from .transport import HttpTransport, HttpResponse
from .errors import ErrorResponse
from .events import (
    EventEmitter,
    NAVIGATING,
    NAVIGATED,
    NavigatingEvent,
    NavigatedEvent,
    NavigationListener
)

__all__ = [
    # Transport
    'HttpTransport',
    'HttpResponse',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    
    # Errors
    'ErrorResponse',
    
    # Events
    'EventEmitter',
    'NAVIGATING',
    'NAVIGATED',
    'NavigatingEvent',
    'NavigatedEvent',
    'NavigationListener',
]
