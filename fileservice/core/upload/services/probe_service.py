"""
Existence probe service.

Asks the server whether a resource already holds a file, without
transferring the file itself.
"""
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional
import logging

from aiohttp.hdrs import CONTENT_DISPOSITION, LAST_MODIFIED, METH_HEAD
from aiohttp.multipart import content_disposition_filename, parse_content_disposition

from ..models import CheckFileResult
from ...api.transport import HttpTransport, HttpResponse
from ...utils import decode_content_md5, file_uri, require_positive

CONTENT_MD5 = 'Content-MD5'


class ExistenceProber:
    """
    Issues HEAD requests against a file resource.
    
    204 means the file exists, 404 means it does not (a normal answer, not
    an error); anything else is a server error carrying the raw body.
    """
    
    def __init__(self, transport: HttpTransport, base_url: str):
        self._transport = transport
        self._base_url = base_url
        self._logger = logging.getLogger('fileservice.upload.probe')
    
    async def probe(self, resource_id: int) -> CheckFileResult:
        """
        Probe a resource.
        
        Args:
            resource_id: Target resource (must be > 0)
            
        Returns:
            CheckFileResult
            
        Raises:
            InvalidArgumentError: If resource_id is not positive
            TransportError: If no response was obtained
        """
        require_positive('resource_id', resource_id)
        uri = file_uri(self._base_url, resource_id)
        
        response = await self._transport.send(resource_id, METH_HEAD, uri)
        
        if response.status == 204:
            result = CheckFileResult(
                status_code=response.status,
                full_uri=uri,
                found=True,
                last_modified=self._last_modified(response),
                file_name_on_server=self._file_name(response),
                hash_for_file_on_server=decode_content_md5(response.headers.get(CONTENT_MD5))
            )
            self._logger.info(f"Resource {resource_id} exists on server")
            return result
        
        if response.status == 404:
            # Normal answer when nothing has been uploaded yet
            self._logger.info(f"Resource {resource_id} has no file on server")
            return CheckFileResult(status_code=response.status, full_uri=uri)
        
        self._logger.warning(f"Probe of resource {resource_id} failed with {response.status}")
        return CheckFileResult(
            status_code=response.status,
            full_uri=uri,
            error=response.text
        )
    
    def _last_modified(self, response: HttpResponse) -> Optional[datetime]:
        value = response.headers.get(LAST_MODIFIED)
        if not value:
            return None
        try:
            return parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            self._logger.debug(f"Ignoring unparsable Last-Modified: {value!r}")
            return None
    
    def _file_name(self, response: HttpResponse) -> Optional[str]:
        value = response.headers.get(CONTENT_DISPOSITION)
        if not value:
            return None
        _, params = parse_content_disposition(value)
        return content_disposition_filename(params, 'filename')
