"""
FileServiceClient - High-level async client for the metadata file service.

Example:
    >>> async with FileServiceClient(token, "https://mds.example.com/api/") as client:
    ...     check = await client.check_file(42)
    ...     if not check.found:
    ...         result = await client.upload_file("report.bin", 42)
"""
from pathlib import Path
from typing import Callable, Optional, Union

import aiohttp

from .core.api import APIConfig, HttpTransport, NavigationListener
from .core.exceptions import InvalidArgumentError, UploadError
from .core.logging import get_logger
from .core.upload import (
    CheckFileResult,
    CreateSessionResult,
    ExistenceProber,
    FilePart,
    PartTransmitter,
    SessionNegotiator,
    UploadConfig,
    UploadCoordinator,
    UploadProgress,
    UploadResult,
    UploadStreamResult
)
from .core.upload.protocols import ByteStream, ChunkingStrategy


class FileServiceClient:
    """
    Async client for resumable chunked uploads.

    Owns its HTTP transport unless an aiohttp ClientSession is passed in,
    in which case the session stays open after the client is closed.

    Events:
        'navigating' - NavigatingEvent, before each request
        'navigated'  - NavigatedEvent, after each response
    """

    def __init__(
        self,
        access_token: str,
        base_url: str,
        *,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize client.

        Args:
            access_token: Bearer token for every request
            base_url: Service base address; keep the trailing '/' so that
                relative resource paths resolve under it
            config: Optional API configuration
            session: Optional caller-owned aiohttp session

        Raises:
            InvalidArgumentError: If the token or base address is empty
        """
        if not base_url or not base_url.strip():
            raise InvalidArgumentError('base_url', 'must be a non-empty string')

        self._base_url = base_url
        self._logger = get_logger('fileservice.client')
        self._transport = HttpTransport(access_token, config=config, session=session)
        self._prober = ExistenceProber(self._transport, base_url)
        self._negotiator = SessionNegotiator(self._transport, base_url)
        self._transmitter = PartTransmitter(self._transport, base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def transport(self) -> HttpTransport:
        """Underlying HTTP transport."""
        return self._transport

    async def __aenter__(self) -> 'FileServiceClient':
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release the transport (a borrowed session is left open)."""
        await self._transport.close()

    # Events

    def on(self, event: str, callback: Callable) -> 'FileServiceClient':
        """Register an event handler."""
        self._transport.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'FileServiceClient':
        """Remove an event handler."""
        self._transport.off(event, callback)
        return self

    def add_listener(self, listener: NavigationListener) -> 'FileServiceClient':
        """Register a navigation listener."""
        self._transport.add_listener(listener)
        return self

    def remove_listener(self, listener: NavigationListener) -> 'FileServiceClient':
        """Remove a navigation listener."""
        self._transport.remove_listener(listener)
        return self

    # Protocol operations

    async def check_file(self, resource_id: int) -> CheckFileResult:
        """Probe whether the resource already holds a file."""
        return await self._prober.probe(resource_id)

    async def create_upload_session(self, resource_id: int) -> CreateSessionResult:
        """Negotiate a new upload session for the resource."""
        return await self._negotiator.create_session(resource_id)

    async def upload_stream(
        self,
        resource_id: int,
        session_id: str,
        stream: ByteStream,
        file_part: FilePart,
        file_name: str,
        full_file_size: int,
        file_parts_count: int,
        num_parts_uploaded: int
    ) -> UploadStreamResult:
        """Upload one part of a file read from a shared stream."""
        return await self._transmitter.upload_part(
            resource_id,
            session_id,
            stream,
            file_part,
            file_name,
            full_file_size,
            file_parts_count,
            num_parts_uploaded
        )

    # Orchestration

    async def upload_file(
        self,
        file_path: Union[str, Path],
        resource_id: int,
        *,
        file_name: Optional[str] = None,
        part_size: Optional[int] = None,
        check_existing: bool = True,
        skip_if_unchanged: bool = True,
        start_part: int = 0,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None,
        raise_on_failure: bool = False
    ) -> UploadResult:
        """
        Upload a whole file: probe, negotiate a session, send every part.

        Args:
            file_path: Local file
            resource_id: Target resource
            file_name: Name sent to the server (defaults to the local name)
            part_size: Part size in bytes (defaults to the session's chunk size)
            check_existing: Probe before negotiating
            skip_if_unchanged: Skip when the server already has identical content
            start_part: First part to send, to resume an interrupted upload
            chunking_strategy: Custom part boundaries
            progress_callback: Called after each accepted part
            raise_on_failure: Raise UploadError instead of returning an
                incomplete result

        Returns:
            UploadResult
        """
        config = UploadConfig(
            file_path=file_path,
            resource_id=resource_id,
            file_name=file_name,
            part_size=part_size,
            check_existing=check_existing,
            skip_if_unchanged=skip_if_unchanged,
            start_part=start_part
        )
        coordinator = UploadCoordinator(
            self._prober,
            self._negotiator,
            self._transmitter,
            chunking_strategy=chunking_strategy,
            progress_callback=progress_callback
        )
        result = await coordinator.upload(config)

        if raise_on_failure and not result.is_complete:
            self._logger.debug(f"Upload of {config.file_name} incomplete, raising")
            status = None
            if result.part_result is not None:
                status = result.part_result.status_code
            elif result.session_result is not None:
                status = result.session_result.status_code
            elif result.check is not None:
                status = result.check.status_code
            raise UploadError(
                f"Upload of {config.file_name} to resource {resource_id} did not complete: {result.error}",
                result=result,
                status_code=status
            )
        return result
