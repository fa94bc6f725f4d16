"""
Part upload service.

Sends one part of a file to an upload session.
"""
import logging
import time

import aiohttp
from aiohttp.hdrs import CONTENT_RANGE, CONTENT_TYPE, METH_PUT
from multidict import CIMultiDict

from .file_service import read_stream_range
from ..models import FilePart, UploadStreamResult
from ..protocols import ByteStream
from ...api.transport import HttpTransport
from ...exceptions import InvalidArgumentError
from ...utils import encode_content_md5, require_non_negative, require_positive, upload_sessions_uri

CONTENT_MD5 = 'Content-MD5'
SESSION_HEADER = 'X-Upload-Session-Id'
OCTET_STREAM = 'application/octet-stream'


def part_headers(part: FilePart) -> CIMultiDict:
    """Headers of the single body part carrying a file part."""
    return CIMultiDict({
        CONTENT_TYPE: OCTET_STREAM,
        CONTENT_RANGE: part.content_range,
        CONTENT_MD5: encode_content_md5(part.hash),
    })


def build_part_body(data: bytes, part: FilePart, file_name: str) -> aiohttp.MultipartWriter:
    """
    Wrap a part's bytes as a one-field multipart/form-data body.

    Args:
        data: The part's bytes
        part: Descriptor of the part
        file_name: Name announced in Content-Disposition

    Returns:
        MultipartWriter ready to be sent
    """
    payload = aiohttp.BytesPayload(data, headers=part_headers(part))
    payload.set_content_disposition('attachment', filename=file_name)

    writer = aiohttp.MultipartWriter('form-data')
    writer.append_payload(payload)
    return writer


class PartTransmitter:
    """
    Uploads file parts, one request per part.

    Parts of one session must go out sequentially in increasing offset
    order; the stream's read position is shared and unsynchronized.
    The stream is never closed here.
    """

    def __init__(self, transport: HttpTransport, base_url: str):
        self._transport = transport
        self._base_url = base_url
        self._logger = logging.getLogger('fileservice.upload.part')

    async def upload_part(
        self,
        resource_id: int,
        session_id: str,
        stream: ByteStream,
        part: FilePart,
        file_name: str,
        full_file_size: int,
        total_parts: int,
        parts_uploaded: int
    ) -> UploadStreamResult:
        """
        Upload a single part.

        Args:
            resource_id: Target resource (must be > 0)
            session_id: Session the part belongs to
            stream: Seekable stream holding the whole file
            part: Descriptor of the part to send
            file_name: Name of the file on the server
            full_file_size: Size of the whole file in bytes
            total_parts: Number of parts of the file
            parts_uploaded: Parts already uploaded before this one

        Returns:
            UploadStreamResult; on success parts_uploaded is one more than
            the value passed in, on failure it is unchanged

        Raises:
            InvalidArgumentError: On bad arguments, a part past the end of
                the file, or a short stream
            TransportError: If no response was obtained
        """
        require_positive('resource_id', resource_id)
        require_non_negative('parts_uploaded', parts_uploaded)
        require_non_negative('total_parts', total_parts)
        require_non_negative('full_file_size', full_file_size)
        if not isinstance(part, FilePart):
            raise TypeError(f"part must be a FilePart, got {type(part).__name__}")
        if part.end > full_file_size:
            raise InvalidArgumentError(
                'part',
                f"range {part.offset}-{part.end} extends past file size {full_file_size}"
            )

        uri = upload_sessions_uri(self._base_url, resource_id)
        data = await read_stream_range(stream, part.offset, part.size)
        body = build_part_body(data, part, file_name)
        headers = {SESSION_HEADER: str(session_id)}

        size_kb = part.size / 1024
        self._logger.debug(
            f"Uploading part {parts_uploaded + 1}/{total_parts} of {file_name} "
            f"({part.content_range}, {size_kb:.1f} KB)"
        )
        upload_start = time.time()

        response = await self._transport.send(
            resource_id,
            METH_PUT,
            uri,
            data=body,
            headers=headers,
            timeout=self._transport.config.timeout.part_upload_timeout()
        )

        if response.ok:
            upload_time = time.time() - upload_start
            self._logger.debug(f"Part at offset {part.offset} accepted in {upload_time:.2f}s")
            return UploadStreamResult(
                status_code=response.status,
                accepted=True,
                parts_uploaded=parts_uploaded + 1,
                full_uri=uri
            )

        self._logger.error(
            f"Part at offset {part.offset} of resource {resource_id} rejected with {response.status}"
        )
        return UploadStreamResult(
            status_code=response.status,
            accepted=False,
            parts_uploaded=parts_uploaded,
            full_uri=uri,
            error=response.text
        )
