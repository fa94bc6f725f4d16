"""Pytest fixtures for fileservice tests."""
from typing import Any, Dict, List, Optional, Union

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from fileservice.core.api import HttpTransport
from fileservice.core.upload.services import ExistenceProber, PartTransmitter, SessionNegotiator

BASE_URL = "https://mds.example.com/api/"
TOKEN = "test-token"


class FakeResponse:
    """Stands in for aiohttp.ClientResponse inside `async with session.request(...)`."""
    
    def __init__(
        self,
        status: int,
        text: Union[str, bytes] = "",
        headers: Optional[Dict[str, str]] = None,
        reason: str = ""
    ):
        self.status = status
        self.reason = reason
        self.headers = CIMultiDictProxy(CIMultiDict(headers or {}))
        self._body = text if isinstance(text, bytes) else text.encode('utf-8')
    
    async def read(self) -> bytes:
        return self._body
    
    async def text(self, encoding: Optional[str] = None, errors: str = 'strict') -> str:
        return self._body.decode(encoding or 'utf-8', errors)
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc, tb):
        return False


class _RaisingContext:
    def __init__(self, error: BaseException):
        self._error = error
    
    async def __aenter__(self):
        raise self._error
    
    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    In-memory replacement for aiohttp.ClientSession.
    
    Replays queued responses (or exceptions) in order and records every
    request it receives.
    """
    
    def __init__(self, *responses):
        self.responses: List[Any] = list(responses)
        self.requests: List[Dict[str, Any]] = []
        self.closed = False
    
    def queue(self, *responses) -> 'FakeSession':
        self.responses.extend(responses)
        return self
    
    def request(self, method: str, url: str, **kwargs):
        self.requests.append({'method': method, 'url': url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            return _RaisingContext(response)
        return response
    
    async def close(self):
        self.closed = True


class RecordingListener:
    """NavigationListener that records events in order."""
    
    def __init__(self):
        self.events = []
    
    def on_navigating(self, event):
        self.events.append(('navigating', event))
    
    def on_navigated(self, event):
        self.events.append(('navigated', event))


@pytest.fixture
def fake_session():
    """Empty fake session; tests queue responses on it."""
    return FakeSession()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def transport(fake_session, listener):
    """Transport borrowing the fake session, with a recording listener attached."""
    t = HttpTransport(TOKEN, session=fake_session)
    t.add_listener(listener)
    return t


@pytest.fixture
def prober(transport):
    return ExistenceProber(transport, BASE_URL)


@pytest.fixture
def negotiator(transport):
    return SessionNegotiator(transport, BASE_URL)


@pytest.fixture
def transmitter(transport):
    return PartTransmitter(transport, BASE_URL)


@pytest.fixture
def sample_session_data():
    """Upload session body as returned by the service."""
    return {
        'SessionId': '6f1c2a7e-3b8d-4c55-9a0e-2f4d7b1e9c10',
        'FileUploadChunkSizeInBytes': 4194304,
        'FileUploadMaxFileSizeInMegabytes': 2048,
        'SessionStartedBy': 'user@example.com',
        'SessionStartedDateTimeUtc': '2024-03-01T10:15:30.1234567Z',
        'SessionExpirationDateTimeUtc': '2024-03-02T10:15:30Z',
    }
