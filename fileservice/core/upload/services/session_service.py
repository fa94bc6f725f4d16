"""
Upload session negotiation service.
"""
import json
import logging

from aiohttp.hdrs import METH_POST

from ..models import CreateSessionResult, UploadSession
from ...api.errors import ErrorResponse
from ...api.transport import HttpTransport
from ...utils import require_positive, upload_sessions_uri


class SessionNegotiator:
    """
    Requests new upload sessions.
    
    Responsibilities:
    - POST an empty JSON object to the resource's upload sessions address
    - Turn 200 bodies into UploadSession values
    - Surface 400 rejections with their machine-readable error code
    """
    
    def __init__(self, transport: HttpTransport, base_url: str):
        self._transport = transport
        self._base_url = base_url
        self._logger = logging.getLogger('fileservice.upload.session')
    
    async def create_session(self, resource_id: int) -> CreateSessionResult:
        """
        Negotiate a new upload session.
        
        Args:
            resource_id: Target resource (must be > 0)
            
        Returns:
            CreateSessionResult (created, rejected, or server error)
            
        Raises:
            InvalidArgumentError: If resource_id is not positive
            TransportError: If no response was obtained
        """
        require_positive('resource_id', resource_id)
        uri = upload_sessions_uri(self._base_url, resource_id)
        
        response = await self._transport.send(resource_id, METH_POST, uri, json={})
        
        if response.status == 200:
            try:
                session = UploadSession.from_dict(json.loads(response.text), resource_id=resource_id)
            except ValueError as e:
                self._logger.error(f"Malformed upload session for resource {resource_id}: {e}")
                return CreateSessionResult(
                    status_code=response.status,
                    full_uri=uri,
                    error=response.text
                )
            
            self._logger.info(f"Upload session {session.session_id} created for resource {resource_id}")
            return CreateSessionResult(
                status_code=response.status,
                full_uri=uri,
                session=session
            )
        
        if response.status == 400:
            error = ErrorResponse.parse(response.text)
            self._logger.warning(
                f"Upload session for resource {resource_id} rejected (code={error.error_code})"
            )
            return CreateSessionResult(
                status_code=response.status,
                full_uri=uri,
                error_code=error.error_code,
                error=response.text
            )
        
        self._logger.warning(f"Upload session for resource {resource_id} failed with {response.status}")
        return CreateSessionResult(
            status_code=response.status,
            full_uri=uri,
            error=response.text
        )
