"""
Async HTTP transport for the file service.

Wraps an aiohttp ClientSession with the bearer and JSON accept headers,
fires navigation events around each request, and turns network failures
into TransportError.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from .config import APIConfig
from .events import (
    EventEmitter,
    NAVIGATING,
    NAVIGATED,
    NavigatingEvent,
    NavigatedEvent,
    NavigationListener
)
from ..exceptions import InvalidArgumentError, RequestTimeoutError, TransportError
from ..logging import get_logger


@dataclass(frozen=True)
class HttpResponse:
    """
    Snapshot of a completed HTTP exchange.

    The body is read while the connection is still open, so the snapshot
    stays valid after the aiohttp response is released.
    """
    status: int
    reason: str
    headers: CIMultiDictProxy = field(
        default_factory=lambda: CIMultiDictProxy(CIMultiDict())
    )
    text: str = ''

    @property
    def ok(self) -> bool:
        """True for any 2xx status."""
        return 200 <= self.status < 300


class HttpTransport:
    """
    Shared HTTP plumbing for the prober, negotiator and transmitter.

    The transport either owns its ClientSession (created lazily, closed by
    close()) or borrows one supplied by the caller, which it never closes.

    Example:
        >>> async with HttpTransport(token) as transport:
        ...     response = await transport.send(42, 'HEAD', url)
    """

    def __init__(
        self,
        access_token: str,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            access_token: Bearer token sent with every request
            config: API configuration (uses defaults if not provided)
            session: Optional caller-owned session to borrow
        """
        if not access_token or not access_token.strip():
            raise InvalidArgumentError('access_token', 'must be a non-empty string')

        self._config = config or APIConfig.default()
        self._access_token = access_token
        self._session = session
        self._owns_session = session is None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._events = EventEmitter('fileservice.events')

        self._logger = get_logger('fileservice.api', self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def owns_session(self) -> bool:
        """True when close() will close the underlying session."""
        return self._owns_session

    @property
    def default_headers(self) -> Dict[str, str]:
        """Headers attached to every request."""
        return {
            'User-Agent': self._config.user_agent,
            **self._config.extra_headers,
            'Accept': 'application/json',
            'Authorization': f'Bearer {self._access_token}',
        }

    # Events

    def on(self, event: str, callback: Callable) -> 'HttpTransport':
        """Register a callback for 'navigating' or 'navigated'."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'HttpTransport':
        """Remove a callback."""
        self._events.off(event, callback)
        return self

    def add_listener(self, listener: NavigationListener) -> 'HttpTransport':
        """Register both hooks of a NavigationListener."""
        self._events.on(NAVIGATING, listener.on_navigating)
        self._events.on(NAVIGATED, listener.on_navigated)
        return self

    def remove_listener(self, listener: NavigationListener) -> 'HttpTransport':
        """Unregister a NavigationListener."""
        self._events.off(NAVIGATING, listener.on_navigating)
        self._events.off(NAVIGATED, listener.on_navigated)
        return self

    # Lifecycle

    async def __aenter__(self) -> 'HttpTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or (self._owns_session and self._session.closed):
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Release the session if this transport created it."""
        if not self._owns_session:
            return

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    # Requests

    async def send(
        self,
        resource_id: int,
        method: str,
        uri: str,
        **kwargs: Any
    ) -> HttpResponse:
        """
        Send one request and read the full response.

        Args:
            resource_id: Resource the request is about (for events)
            method: HTTP method
            uri: Absolute target address
            **kwargs: Passed to ClientSession.request (data, json, headers...)

        Returns:
            HttpResponse snapshot, whatever the status

        Raises:
            TransportError: If no response could be obtained
            RequestTimeoutError: If the configured timeout elapsed
        """
        session = await self._ensure_session()
        headers = {**self.default_headers, **kwargs.pop('headers', {})}
        for key, value in self._config.get_request_kwargs().items():
            kwargs.setdefault(key, value)

        self._events.emit(NAVIGATING, NavigatingEvent(resource_id, uri, method))
        self._logger.debug(f"{method} {uri}")

        try:
            async with session.request(method, uri, headers=headers, **kwargs) as response:
                # Undecodable bytes become U+FFFD instead of failing the exchange
                text = await response.text(errors='replace')
                result = HttpResponse(
                    status=response.status,
                    reason=response.reason or '',
                    headers=response.headers,
                    text=text
                )
        except asyncio.TimeoutError as e:
            self._logger.error(f"{method} {uri} timed out")
            raise RequestTimeoutError(
                f"{method} {uri} timed out", method=method, uri=uri
            ) from e
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error on {method} {uri}: {e}")
            raise TransportError(
                f"Network error on {method} {uri}: {e}", method=method, uri=uri
            ) from e

        self._logger.debug(f"{method} {uri} -> {result.status} {result.reason}")
        self._events.emit(
            NAVIGATED,
            NavigatedEvent(resource_id, method, uri, result.status, result.reason)
        )
        return result
