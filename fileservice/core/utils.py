import base64
import binascii
from typing import Optional
from urllib.parse import urljoin

from .exceptions import InvalidArgumentError


def require_positive(name: str, value) -> int:
    """Validates a strictly positive integer argument."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(name, f"must be a positive integer, got {value!r}")
    return value


def require_non_negative(name: str, value) -> int:
    """Validates a non-negative integer argument."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(name, f"must be a non-negative integer, got {value!r}")
    return value


def file_uri(base_url: str, resource_id: int) -> str:
    """Address of a file resource, resolved against the base address."""
    return urljoin(base_url, f"Files({resource_id})")


def upload_sessions_uri(base_url: str, resource_id: int) -> str:
    """Address of the upload sessions of a file resource."""
    return urljoin(base_url, f"Files({resource_id})/UploadSessions")


def encode_content_md5(hash_text: str) -> str:
    """Encodes a hash string as a Content-MD5 header value (Base64 of its UTF-8 bytes)."""
    return base64.b64encode(hash_text.encode('utf-8')).decode('ascii')


def decode_content_md5(header_value: Optional[str]) -> Optional[str]:
    """Decodes a Content-MD5 header back to text; undecodable values are returned as-is."""
    if header_value is None:
        return None
    try:
        return base64.b64decode(header_value, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return header_value
