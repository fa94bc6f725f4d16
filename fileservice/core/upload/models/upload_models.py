"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
import re

from ...exceptions import InvalidArgumentError
from ...utils import require_positive, require_non_negative


@dataclass(frozen=True)
class FilePart:
    """
    One chunk of a file.

    A descriptor maps to exactly one transmission; retrying a part reuses
    the same descriptor.

    Attributes:
        offset: Start position in bytes
        size: Length in bytes
        hash: Checksum of the part's bytes

    Example:
        >>> part = FilePart(offset=1024, size=512, hash="9e107d9d372bb6826bd81d3542a419d6")
        >>> part.content_range
        'bytes 1024-1536/*'
    """
    offset: int
    size: int
    hash: str

    def __post_init__(self):
        require_non_negative('offset', self.offset)
        require_positive('size', self.size)
        if not isinstance(self.hash, str) or not self.hash:
            raise InvalidArgumentError('hash', 'must be a non-empty string')

    @property
    def end(self) -> int:
        """Position one past the last byte of the part."""
        return self.offset + self.size

    @property
    def content_range(self) -> str:
        """Content-Range header value spanning [offset, offset + size), total length unknown."""
        return f"bytes {self.offset}-{self.end}/*"


_SESSION_FIELDS = {
    'sessionid': 'session_id',
    'resourceid': 'resource_id',
    'fileuploadchunksizeinbytes': 'chunk_size',
    'fileuploadmaxfilesizeinmegabytes': 'max_file_size_mb',
    'sessionstartedby': 'started_by',
    'sessionstarteddatetimeutc': 'started_at',
    'sessionexpirationdatetimeutc': 'expires_at',
}

_FRACTION = re.compile(r"\.(\d+)")


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as emitted by the service (trailing Z, 7-digit fractions)."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Not a timestamp: {value!r}")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.strip())
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    return datetime.fromisoformat(text)


def _parse_size(key: str, value: Any) -> Optional[int]:
    """Sizes advertised by the service must be positive JSON integers."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{key} must be a positive integer, got {value!r}")
    return value


@dataclass(frozen=True)
class UploadSession:
    """
    Server-issued upload session for one resource.

    The server owns the session lifecycle; this value is never changed
    locally.

    Attributes:
        session_id: Opaque identifier, kept exactly as received
        resource_id: Resource the session belongs to
        chunk_size: Part size the server expects, if advertised
        max_file_size_mb: Largest accepted file, if advertised
        started_by: Principal that opened the session
        started_at: Session start time
        expires_at: Session expiry time
        extra: Any other fields the server returned
    """
    session_id: str
    resource_id: int
    chunk_size: Optional[int] = None
    max_file_size_mb: Optional[int] = None
    started_by: Optional[str] = None
    started_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        resource_id: Optional[int] = None
    ) -> 'UploadSession':
        """
        Create from the service's JSON object.

        Keys are matched case-insensitively.

        Args:
            data: Decoded response body
            resource_id: Requested resource, used when the body has none

        Returns:
            UploadSession instance

        Raises:
            ValueError: If the body has no session id or no resource id is known,
                or advertises a size that is not a positive integer
        """
        if not isinstance(data, dict):
            raise ValueError(f"Upload session must be a JSON object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            name = _SESSION_FIELDS.get(key.lower())
            if name is None:
                extra[key] = value
            elif name in ('started_at', 'expires_at'):
                try:
                    values[name] = _parse_datetime(value)
                except ValueError:
                    extra[key] = value
            elif name in ('chunk_size', 'max_file_size_mb'):
                values[name] = _parse_size(key, value)
            else:
                values[name] = value

        session_id = values.get('session_id')
        if session_id is None or session_id == '':
            raise ValueError("Upload session has no SessionId")

        session_resource = values.get('resource_id', resource_id)
        if session_resource is None:
            raise ValueError("Upload session has no ResourceId")
        try:
            session_resource = int(session_resource)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Upload session has an invalid ResourceId: {session_resource!r}") from e

        return cls(
            session_id=str(session_id),
            resource_id=session_resource,
            chunk_size=values.get('chunk_size'),
            max_file_size_mb=values.get('max_file_size_mb'),
            started_by=values.get('started_by'),
            started_at=values.get('started_at'),
            expires_at=values.get('expires_at'),
            extra=extra
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the service's JSON shape."""
        result: Dict[str, Any] = {
            'SessionId': self.session_id,
            'ResourceId': self.resource_id,
        }
        if self.chunk_size is not None:
            result['FileUploadChunkSizeInBytes'] = self.chunk_size
        if self.max_file_size_mb is not None:
            result['FileUploadMaxFileSizeInMegabytes'] = self.max_file_size_mb
        if self.started_by is not None:
            result['SessionStartedBy'] = self.started_by
        if self.started_at is not None:
            result['SessionStartedDateTimeUtc'] = self.started_at.isoformat()
        if self.expires_at is not None:
            result['SessionExpirationDateTimeUtc'] = self.expires_at.isoformat()
        result.update(self.extra)
        return result


@dataclass(frozen=True)
class CheckFileResult:
    """
    Outcome of one existence probe.

    Attributes:
        status_code: HTTP status returned by the server
        full_uri: Canonical address of the resource
        found: True when the server holds a file for the resource
        last_modified: Server-side modification time
        file_name_on_server: File name declared by the server
        hash_for_file_on_server: Checksum declared by the server
        error: Raw response body for unexpected statuses
    """
    status_code: int
    full_uri: str
    found: bool = False
    last_modified: Optional[datetime] = None
    file_name_on_server: Optional[str] = None
    hash_for_file_on_server: Optional[str] = None
    error: Optional[str] = None

    @property
    def not_found(self) -> bool:
        """True when the server answered 404 (no file yet)."""
        return self.status_code == 404

    @property
    def is_error(self) -> bool:
        """True when the server answered neither 'exists' nor 'not found'."""
        return not self.found and not self.not_found


@dataclass(frozen=True)
class CreateSessionResult:
    """
    Outcome of one session negotiation.

    Attributes:
        status_code: HTTP status returned by the server
        full_uri: Upload sessions address of the resource
        session: The new session, when created
        error_code: Machine-readable rejection reason (400 only)
        error: Raw response body for anything but success
    """
    status_code: int
    full_uri: str
    session: Optional[UploadSession] = None
    error_code: Optional[str] = None
    error: Optional[str] = None

    @property
    def created(self) -> bool:
        """True when a session was issued."""
        return self.session is not None

    @property
    def rejected(self) -> bool:
        """True when the server refused with a structured (400) answer."""
        return self.status_code == 400


@dataclass(frozen=True)
class UploadStreamResult:
    """
    Outcome of one part transmission.

    Attributes:
        status_code: HTTP status returned by the server
        accepted: True when the server took the part
        parts_uploaded: Number of parts uploaded after this attempt
        full_uri: Address the part was sent to
        error: Raw response body on failure
    """
    status_code: int
    accepted: bool
    parts_uploaded: int
    full_uri: Optional[str] = None
    error: Optional[str] = None


@dataclass
class UploadConfig:
    """
    Configuration for an orchestrated upload.

    Attributes:
        file_path: Local file to upload
        resource_id: Target resource on the server
        file_name: Name sent to the server (defaults to the local name)
        part_size: Part size in bytes (defaults to the session's chunk size)
        check_existing: Probe the resource before negotiating a session
        skip_if_unchanged: Skip the upload when the server hash matches
        start_part: Index of the first part to send (to resume)
    """
    file_path: Path
    resource_id: int
    file_name: Optional[str] = None
    part_size: Optional[int] = None
    check_existing: bool = True
    skip_if_unchanged: bool = True
    start_part: int = 0

    def __post_init__(self):
        """Validate and normalize config."""
        if isinstance(self.file_path, str):
            self.file_path = Path(self.file_path)

        require_positive('resource_id', self.resource_id)
        require_non_negative('start_part', self.start_part)
        if self.part_size is not None:
            require_positive('part_size', self.part_size)

        if self.file_name is None:
            self.file_name = self.file_path.name


@dataclass
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        total_parts: Total number of parts
        uploaded_parts: Number of uploaded parts
        total_bytes: Total file size
        uploaded_bytes: Bytes uploaded so far
    """
    total_parts: int
    uploaded_parts: int = 0
    total_bytes: int = 0
    uploaded_bytes: int = 0

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.total_parts == 0:
            return 0.0
        return (self.uploaded_parts / self.total_parts) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True if upload is complete."""
        return self.uploaded_parts >= self.total_parts


@dataclass(frozen=True)
class UploadResult:
    """
    Result of an orchestrated upload.

    Attributes:
        resource_id: Target resource
        file_name: Name sent to the server
        file_size: Size of the local file
        total_parts: Number of parts the file was split into
        parts_uploaded: Parts the server accepted (including skipped resume parts)
        check: Probe result, when a probe was made
        session_result: Session negotiation result, when attempted
        failed_part: The part that failed, if any
        part_result: Result of the last part transmission
        skipped: True when the server already held an identical file
    """
    resource_id: int
    file_name: str
    file_size: int
    total_parts: int = 0
    parts_uploaded: int = 0
    check: Optional[CheckFileResult] = None
    session_result: Optional[CreateSessionResult] = None
    failed_part: Optional[FilePart] = None
    part_result: Optional[UploadStreamResult] = None
    skipped: bool = False

    @property
    def session(self) -> Optional[UploadSession]:
        """Session used for the upload."""
        return self.session_result.session if self.session_result else None

    @property
    def is_complete(self) -> bool:
        """True when every part is on the server (or nothing had to be sent)."""
        if self.skipped:
            return True
        return self.failed_part is None and self.parts_uploaded >= self.total_parts and self.created

    @property
    def created(self) -> bool:
        return self.session_result is not None and self.session_result.created

    @property
    def error(self) -> Optional[str]:
        """Diagnostic text of whatever stopped the upload."""
        if self.part_result is not None and not self.part_result.accepted:
            return self.part_result.error
        if self.session_result is not None and not self.session_result.created:
            return self.session_result.error
        if self.check is not None and self.check.is_error:
            return self.check.error
        return None
