"""
Upload coordinator.

Drives probe, session negotiation and part transfer for one file.
Holds no state between uploads; resuming is done by the caller through
UploadConfig.start_part.
"""
import logging
from typing import Callable, Optional

import aiofiles

from .models import (
    CheckFileResult,
    UploadConfig,
    UploadProgress,
    UploadResult,
    UploadStreamResult
)
from .protocols import ChunkingStrategy, HashStrategy
from .services import (
    AsyncFileReader,
    ExistenceProber,
    FileValidator,
    PartTransmitter,
    SessionNegotiator
)
from .strategies import FixedSizeChunkingStrategy, MD5HashStrategy

logger = logging.getLogger('fileservice.upload.coordinator')


class UploadCoordinator:
    """
    Coordinates the file upload process.

    Uses dependency injection for all components, making it:
    - Testable (mock dependencies)
    - Extensible (swap strategies)

    Sequence: [probe] -> create session -> part 1 -> ... -> part N.
    Parts go out one at a time, in increasing offset order, over a single
    file handle. The first failed part stops the upload.
    """

    def __init__(
        self,
        prober: ExistenceProber,
        negotiator: SessionNegotiator,
        transmitter: PartTransmitter,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        hash_strategy: Optional[HashStrategy] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            prober: Existence prober
            negotiator: Session negotiator
            transmitter: Part transmitter
            chunking_strategy: Fixed strategy for part boundaries; when omitted
                the part size comes from the config or the session
            hash_strategy: Part checksum algorithm (MD5 by default)
            progress_callback: Optional callback for progress updates
        """
        self._prober = prober
        self._negotiator = negotiator
        self._transmitter = transmitter
        self._chunking = chunking_strategy
        self._hasher = hash_strategy or MD5HashStrategy()
        self._file_reader = AsyncFileReader(self._hasher)
        self._validator = FileValidator()
        self._progress_callback = progress_callback

    async def upload(self, config: UploadConfig) -> UploadResult:
        """
        Execute the complete upload process.

        Args:
            config: Upload configuration

        Returns:
            UploadResult describing how far the upload got

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the path is not a regular file or the file is empty
            TransportError: If the server could not be reached
        """
        path, file_size = self._validator.validate(config.file_path)
        self._validator.validate_size(file_size)
        resource_id = config.resource_id
        file_size_mb = file_size / (1024 * 1024)
        logger.info(f"Starting upload: {config.file_name} ({file_size_mb:.2f} MB) to resource {resource_id}")

        check: Optional[CheckFileResult] = None
        if config.check_existing:
            check = await self._prober.probe(resource_id)
            if check.is_error:
                logger.warning(f"Existence check failed with {check.status_code}, stopping")
                return UploadResult(resource_id, config.file_name, file_size, check=check)

            if check.found and config.skip_if_unchanged and check.hash_for_file_on_server:
                local_hash = await self._file_reader.hash_file(path)
                if local_hash == check.hash_for_file_on_server:
                    logger.info(f"Resource {resource_id} already holds this file, skipping upload")
                    return UploadResult(resource_id, config.file_name, file_size, check=check, skipped=True)

        session_result = await self._negotiator.create_session(resource_id)
        if not session_result.created:
            logger.warning(
                f"Could not create upload session ({session_result.status_code}, "
                f"code={session_result.error_code})"
            )
            return UploadResult(
                resource_id, config.file_name, file_size,
                check=check, session_result=session_result
            )
        session = session_result.session

        chunking = self._chunking or FixedSizeChunkingStrategy(
            config.part_size or session.chunk_size or FixedSizeChunkingStrategy.DEFAULT_CHUNK_SIZE
        )
        parts = await self._file_reader.describe_parts(path, file_size, chunking)
        total_parts = len(parts)
        logger.info(f"File split into {total_parts} parts")

        parts_uploaded = min(config.start_part, total_parts)
        progress = UploadProgress(
            total_parts=total_parts,
            uploaded_parts=parts_uploaded,
            total_bytes=file_size,
            uploaded_bytes=sum(p.size for p in parts[:parts_uploaded])
        )
        if parts_uploaded:
            logger.info(f"Resuming at part {parts_uploaded + 1}")

        last_result: Optional[UploadStreamResult] = None
        async with aiofiles.open(path, 'rb') as stream:
            for part in parts[parts_uploaded:]:
                last_result = await self._transmitter.upload_part(
                    resource_id,
                    session.session_id,
                    stream,
                    part,
                    config.file_name,
                    file_size,
                    total_parts,
                    parts_uploaded
                )
                if not last_result.accepted:
                    logger.error(
                        f"Upload stopped at part {parts_uploaded + 1}/{total_parts} "
                        f"({last_result.status_code})"
                    )
                    return UploadResult(
                        resource_id, config.file_name, file_size,
                        total_parts=total_parts,
                        parts_uploaded=parts_uploaded,
                        check=check,
                        session_result=session_result,
                        failed_part=part,
                        part_result=last_result
                    )

                parts_uploaded = last_result.parts_uploaded
                progress.uploaded_parts = parts_uploaded
                progress.uploaded_bytes += part.size
                self._report(progress)

        logger.info(f"Upload of {config.file_name} complete ({parts_uploaded}/{total_parts} parts)")
        return UploadResult(
            resource_id, config.file_name, file_size,
            total_parts=total_parts,
            parts_uploaded=parts_uploaded,
            check=check,
            session_result=session_result,
            part_result=last_result
        )

    def _report(self, progress: UploadProgress) -> None:
        if self._progress_callback is None:
            return
        try:
            self._progress_callback(progress)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")
