"""Tests for upload models."""
import json
import pytest
from datetime import datetime, timezone
from pathlib import Path

from fileservice.core.exceptions import InvalidArgumentError
from fileservice.core.upload.models import (
    FilePart,
    UploadSession,
    CheckFileResult,
    CreateSessionResult,
    UploadConfig,
    UploadProgress,
    UploadResult,
    UploadStreamResult
)


class TestFilePart:
    """Test suite for FilePart."""
    
    def test_create(self):
        part = FilePart(offset=1024, size=512, hash="abc")
        
        assert part.offset == 1024
        assert part.size == 512
        assert part.end == 1536
    
    def test_content_range(self):
        part = FilePart(offset=1024, size=512, hash="abc")
        
        assert part.content_range == "bytes 1024-1536/*"
    
    def test_immutable(self):
        part = FilePart(offset=0, size=10, hash="abc")
        
        with pytest.raises(AttributeError):
            part.offset = 5
    
    def test_negative_offset(self):
        with pytest.raises(InvalidArgumentError):
            FilePart(offset=-1, size=10, hash="abc")
    
    @pytest.mark.parametrize("size", [0, -5])
    def test_size_must_be_positive(self, size):
        with pytest.raises(InvalidArgumentError):
            FilePart(offset=0, size=size, hash="abc")
    
    def test_empty_hash(self):
        with pytest.raises(InvalidArgumentError):
            FilePart(offset=0, size=10, hash="")


class TestUploadSession:
    """Test suite for UploadSession."""
    
    def test_from_dict(self, sample_session_data):
        session = UploadSession.from_dict(sample_session_data, resource_id=42)
        
        assert session.session_id == sample_session_data['SessionId']
        assert session.resource_id == 42
        assert session.chunk_size == 4194304
        assert session.max_file_size_mb == 2048
        assert session.started_by == 'user@example.com'
        assert session.started_at == datetime(2024, 3, 1, 10, 15, 30, 123456, tzinfo=timezone.utc)
        assert session.expires_at == datetime(2024, 3, 2, 10, 15, 30, tzinfo=timezone.utc)
        assert session.extra == {}
    
    def test_keys_case_insensitive(self):
        session = UploadSession.from_dict({'sessionId': 'abc', 'resourceId': 7})
        
        assert session.session_id == 'abc'
        assert session.resource_id == 7
    
    def test_body_resource_id_wins(self):
        session = UploadSession.from_dict({'SessionId': 'abc', 'ResourceId': 7}, resource_id=42)
        
        assert session.resource_id == 7
    
    def test_unknown_fields_kept(self):
        session = UploadSession.from_dict({'SessionId': 'abc', 'Region': 'eu'}, resource_id=1)
        
        assert session.extra == {'Region': 'eu'}
        assert session.to_dict()['Region'] == 'eu'
    
    def test_unparsable_timestamp_kept_as_extra(self):
        session = UploadSession.from_dict(
            {'SessionId': 'abc', 'SessionStartedDateTimeUtc': 'yesterday'}, resource_id=1
        )
        
        assert session.started_at is None
        assert session.extra == {'SessionStartedDateTimeUtc': 'yesterday'}
    
    def test_missing_session_id(self):
        with pytest.raises(ValueError, match="SessionId"):
            UploadSession.from_dict({'FileUploadChunkSizeInBytes': 10}, resource_id=1)
    
    def test_missing_resource_id(self):
        with pytest.raises(ValueError, match="ResourceId"):
            UploadSession.from_dict({'SessionId': 'abc'})
    
    @pytest.mark.parametrize("field", ['FileUploadChunkSizeInBytes', 'FileUploadMaxFileSizeInMegabytes'])
    @pytest.mark.parametrize("value", ["4194304", -1, 0, True, 1.5])
    def test_bad_advertised_size(self, field, value):
        with pytest.raises(ValueError, match=field):
            UploadSession.from_dict({'SessionId': 'abc', field: value}, resource_id=1)
    
    def test_null_advertised_size(self):
        session = UploadSession.from_dict({'SessionId': 'abc', 'FileUploadChunkSizeInBytes': None}, resource_id=1)
        
        assert session.chunk_size is None
    
    def test_invalid_resource_id_in_body(self):
        with pytest.raises(ValueError, match="ResourceId"):
            UploadSession.from_dict({'SessionId': 'abc', 'ResourceId': {'id': 1}})
    
    def test_not_an_object(self):
        with pytest.raises(ValueError):
            UploadSession.from_dict(['abc'], resource_id=1)
    
    def test_round_trip(self, sample_session_data):
        session = UploadSession.from_dict(sample_session_data, resource_id=42)
        
        restored = UploadSession.from_dict(json.loads(json.dumps(session.to_dict())))
        
        assert restored == session


class TestCheckFileResult:
    """Test suite for CheckFileResult."""
    
    def test_found(self):
        result = CheckFileResult(status_code=204, full_uri="u", found=True)
        
        assert result.found is True
        assert result.not_found is False
        assert result.is_error is False
    
    def test_not_found_is_not_error(self):
        result = CheckFileResult(status_code=404, full_uri="u")
        
        assert result.not_found is True
        assert result.is_error is False
    
    def test_server_error(self):
        result = CheckFileResult(status_code=500, full_uri="u", error="boom")
        
        assert result.is_error is True


class TestCreateSessionResult:
    """Test suite for CreateSessionResult."""
    
    def test_created(self):
        session = UploadSession(session_id="s", resource_id=1)
        result = CreateSessionResult(status_code=200, full_uri="u", session=session)
        
        assert result.created is True
        assert result.rejected is False
    
    def test_rejected(self):
        result = CreateSessionResult(status_code=400, full_uri="u", error_code="QUOTA_EXCEEDED", error="{}")
        
        assert result.created is False
        assert result.rejected is True


class TestUploadConfig:
    """Test suite for UploadConfig."""
    
    def test_string_path_converted(self):
        config = UploadConfig(file_path="/tmp/data.bin", resource_id=1)
        
        assert config.file_path == Path("/tmp/data.bin")
    
    def test_file_name_defaults_to_local_name(self):
        config = UploadConfig(file_path=Path("/tmp/data.bin"), resource_id=1)
        
        assert config.file_name == "data.bin"
    
    def test_custom_file_name(self):
        config = UploadConfig(file_path=Path("/tmp/data.bin"), resource_id=1, file_name="other.bin")
        
        assert config.file_name == "other.bin"
    
    @pytest.mark.parametrize("resource_id", [0, -3])
    def test_invalid_resource_id(self, resource_id):
        with pytest.raises(InvalidArgumentError):
            UploadConfig(file_path=Path("/tmp/data.bin"), resource_id=resource_id)
    
    def test_invalid_part_size(self):
        with pytest.raises(InvalidArgumentError):
            UploadConfig(file_path=Path("/tmp/data.bin"), resource_id=1, part_size=0)
    
    def test_invalid_start_part(self):
        with pytest.raises(InvalidArgumentError):
            UploadConfig(file_path=Path("/tmp/data.bin"), resource_id=1, start_part=-1)


class TestUploadProgress:
    """Test suite for UploadProgress."""
    
    def test_percentage(self):
        progress = UploadProgress(total_parts=4, uploaded_parts=1)
        
        assert progress.percentage == 25.0
        assert progress.is_complete is False
    
    def test_zero_parts(self):
        progress = UploadProgress(total_parts=0)
        
        assert progress.percentage == 0.0
        assert progress.is_complete is True


class TestUploadResult:
    """Test suite for UploadResult."""
    
    def _session_result(self):
        return CreateSessionResult(
            status_code=200, full_uri="u", session=UploadSession(session_id="s", resource_id=1)
        )
    
    def test_complete(self):
        result = UploadResult(
            1, "f", 10, total_parts=2, parts_uploaded=2, session_result=self._session_result()
        )
        
        assert result.is_complete is True
        assert result.session.session_id == "s"
        assert result.error is None
    
    def test_failed_part(self):
        part_result = UploadStreamResult(status_code=500, accepted=False, parts_uploaded=1, error="disk full")
        result = UploadResult(
            1, "f", 10, total_parts=2, parts_uploaded=1,
            session_result=self._session_result(),
            failed_part=FilePart(offset=5, size=5, hash="h"),
            part_result=part_result
        )
        
        assert result.is_complete is False
        assert result.error == "disk full"
    
    def test_skipped_is_complete(self):
        result = UploadResult(1, "f", 10, skipped=True)
        
        assert result.is_complete is True
    
    def test_session_rejected(self):
        session_result = CreateSessionResult(status_code=400, full_uri="u", error_code="LOCKED", error="locked")
        result = UploadResult(1, "f", 10, session_result=session_result)
        
        assert result.is_complete is False
        assert result.session is None
        assert result.error == "locked"
