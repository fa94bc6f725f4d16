"""Tests for the part upload service."""
import base64
import io
import pytest

from aiohttp import hdrs

from conftest import BASE_URL, FakeResponse
from fileservice.core.api import TimeoutConfig
from fileservice.core.exceptions import InvalidArgumentError, TransportError
from fileservice.core.upload.models import FilePart
from fileservice.core.upload.services import build_part_body, part_headers
from fileservice.core.upload.services.part_service import SESSION_HEADER

SESSION_ID = "0b9f3d0e-1111-2222-3333-444455556666"
PART_HASH = "9e107d9d372bb6826bd81d3542a419d6"


@pytest.fixture
def stream():
    """2 KB stream whose byte at position i is i % 256."""
    return io.BytesIO(bytes(i % 256 for i in range(2048)))


@pytest.fixture
def part():
    return FilePart(offset=1024, size=512, hash=PART_HASH)


def sent_payload(request):
    """The single body part of a recorded PUT."""
    writer = request['data']
    assert len(writer) == 1
    payload, *_ = next(iter(writer))
    return payload


class TestPartHeaders:
    """Test suite for part body construction."""
    
    def test_headers(self, part):
        headers = part_headers(part)
        
        assert headers[hdrs.CONTENT_TYPE] == 'application/octet-stream'
        assert headers[hdrs.CONTENT_RANGE] == 'bytes 1024-1536/*'
        assert base64.b64decode(headers['Content-MD5']) == PART_HASH.encode('utf-8')
    
    def test_body_is_single_attachment(self, part):
        writer = build_part_body(b"x" * 512, part, "report.bin")
        
        assert len(writer) == 1
        payload, *_ = next(iter(writer))
        disposition = payload.headers[hdrs.CONTENT_DISPOSITION]
        assert disposition.startswith('attachment')
        assert 'filename="report.bin"' in disposition
        assert payload.headers[hdrs.CONTENT_RANGE] == 'bytes 1024-1536/*'


class TestPartTransmitter:
    """Test suite for PartTransmitter."""
    
    @pytest.mark.asyncio
    async def test_accepted(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(200))
        
        result = await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        assert result.accepted is True
        assert result.status_code == 200
        assert result.parts_uploaded == 3
        assert result.full_uri == BASE_URL + "Files(42)/UploadSessions"
        assert result.error is None
    
    @pytest.mark.asyncio
    async def test_counter_is_post_increment(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(204))
        
        result = await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 0)
        
        # Counts this part; the pre-increment value would be 0
        assert result.parts_uploaded == 1
        assert result.parts_uploaded != 0
    
    @pytest.mark.asyncio
    async def test_request_wire_format(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(201))
        
        await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        request = fake_session.requests[0]
        assert request['method'] == 'PUT'
        assert request['url'] == BASE_URL + "Files(42)/UploadSessions"
        assert request['headers'][SESSION_HEADER] == SESSION_ID
        assert request['headers']['Authorization'] == 'Bearer test-token'
        
        payload = sent_payload(request)
        assert payload.headers[hdrs.CONTENT_RANGE] == 'bytes 1024-1536/*'
        assert base64.b64decode(payload.headers['Content-MD5']) == PART_HASH.encode('utf-8')
        assert payload.headers[hdrs.CONTENT_TYPE] == 'application/octet-stream'
        assert 'filename="report.bin"' in payload.headers[hdrs.CONTENT_DISPOSITION]
    
    @pytest.mark.asyncio
    async def test_uses_part_upload_timeout(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(200))
        
        await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        timeout = fake_session.requests[0]['timeout']
        assert timeout.total == TimeoutConfig().part_upload
    
    @pytest.mark.asyncio
    async def test_sends_exactly_the_part_bytes(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(200))
        
        await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        payload = sent_payload(fake_session.requests[0])
        assert payload._value == bytes(i % 256 for i in range(1024, 1536))
    
    @pytest.mark.asyncio
    async def test_stream_left_open(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(200))
        
        await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        assert stream.closed is False
        assert stream.tell() == 1536
    
    @pytest.mark.asyncio
    async def test_sequential_parts_increase_counter(self, transmitter, fake_session, stream):
        fake_session.queue(FakeResponse(200), FakeResponse(200))
        first = FilePart(offset=0, size=1024, hash="a")
        second = FilePart(offset=1024, size=1024, hash="b")
        
        r1 = await transmitter.upload_part(42, SESSION_ID, stream, first, "f", 2048, 2, 0)
        r2 = await transmitter.upload_part(42, SESSION_ID, stream, second, "f", 2048, 2, r1.parts_uploaded)
        
        assert (r1.parts_uploaded, r2.parts_uploaded) == (1, 2)
        ranges = [sent_payload(r).headers[hdrs.CONTENT_RANGE] for r in fake_session.requests]
        assert ranges == ['bytes 0-1024/*', 'bytes 1024-2048/*']
    
    @pytest.mark.asyncio
    async def test_failed_part(self, transmitter, fake_session, stream, part):
        fake_session.queue(FakeResponse(416, text="range not satisfiable"))
        
        result = await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        assert result.accepted is False
        assert result.status_code == 416
        assert result.parts_uploaded == 2
        assert result.error == "range not satisfiable"
        assert result.full_uri == BASE_URL + "Files(42)/UploadSessions"
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [
        {'resource_id': 0},
        {'resource_id': -4},
        {'parts_uploaded': -1},
        {'total_parts': -1},
        {'full_file_size': -1},
        {'full_file_size': 1535},
    ])
    async def test_invalid_arguments(self, transmitter, fake_session, listener, stream, part, kwargs):
        args = {
            'resource_id': 42,
            'session_id': SESSION_ID,
            'stream': stream,
            'part': part,
            'file_name': "report.bin",
            'full_file_size': 2048,
            'total_parts': 4,
            'parts_uploaded': 2,
        }
        args.update(kwargs)
        
        with pytest.raises(InvalidArgumentError):
            await transmitter.upload_part(**args)
        
        assert fake_session.requests == []
        assert listener.events == []
    
    @pytest.mark.asyncio
    async def test_part_past_end_of_file(self, transmitter, fake_session, stream, part):
        with pytest.raises(InvalidArgumentError, match="past file size 1500"):
            await transmitter.upload_part(42, SESSION_ID, stream, part, "f", 1500, 4, 0)
        
        assert fake_session.requests == []
        assert stream.tell() == 0
    
    @pytest.mark.asyncio
    async def test_short_stream(self, transmitter, fake_session, part):
        with pytest.raises(InvalidArgumentError, match="stream"):
            await transmitter.upload_part(42, SESSION_ID, io.BytesIO(b"short"), part, "f", 2048, 4, 0)
        
        assert fake_session.requests == []
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [200, 500])
    async def test_navigation_events(self, transmitter, fake_session, listener, stream, part, status):
        fake_session.queue(FakeResponse(status))
        
        await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        assert [name for name, _ in listener.events] == ['navigating', 'navigated']
        assert listener.events[0][1].method == 'PUT'
        assert listener.events[1][1].status_code == status
    
    @pytest.mark.asyncio
    async def test_transport_failure_is_not_a_result(self, transmitter, fake_session, listener, stream, part):
        import aiohttp
        fake_session.queue(aiohttp.ServerDisconnectedError())
        
        with pytest.raises(TransportError):
            await transmitter.upload_part(42, SESSION_ID, stream, part, "report.bin", 2048, 4, 2)
        
        assert [name for name, _ in listener.events] == ['navigating']
