"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import List, Optional, Tuple, Union
import inspect
import logging

import aiofiles

from ..models import FilePart
from ..protocols import ByteStream, ChunkingStrategy, HashStrategy
from ...exceptions import InvalidArgumentError


READ_BUFFER_SIZE = 1024 * 1024


async def read_stream_range(stream: ByteStream, offset: int, size: int) -> bytes:
    """
    Read exactly `size` bytes starting at `offset` from a shared stream.

    Works with plain binary streams and with aiofiles handles.

    Raises:
        InvalidArgumentError: If the stream ends before the range does
    """
    position = stream.seek(offset)
    if inspect.isawaitable(position):
        await position

    data = stream.read(size)
    if inspect.isawaitable(data):
        data = await data

    if len(data) != size:
        raise InvalidArgumentError(
            'stream',
            f"expected {size} bytes at offset {offset}, got {len(data)}"
        )
    return data


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        file_size = path.stat().st_size

        return path, file_size

    def validate_size(self, file_size: int, max_size: Optional[int] = None) -> None:
        """
        Validate file size.

        Args:
            file_size: File size in bytes
            max_size: Optional maximum allowed size

        Raises:
            ValueError: If file is empty or exceeds max size
        """
        if file_size == 0:
            raise ValueError("Cannot upload empty file")

        if max_size and file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum {max_size}"
            )


class AsyncFileReader:
    """
    Asynchronous file reader for part-based uploads.

    Uses aiofiles for non-blocking I/O operations.
    """

    def __init__(self, hasher: HashStrategy, buffer_size: int = READ_BUFFER_SIZE):
        """
        Initialize file reader.

        Args:
            hasher: Checksum algorithm for parts and whole files
            buffer_size: Read size used when hashing whole files
        """
        self._hasher = hasher
        self._buffer_size = buffer_size
        self._logger = logging.getLogger('fileservice.upload.file')

    async def hash_file(self, file_path: Path) -> str:
        """
        Checksum of a whole file, computed incrementally.

        Args:
            file_path: Path to the file

        Returns:
            Checksum text
        """
        state = self._hasher.new()
        async with aiofiles.open(file_path, 'rb') as f:
            while True:
                block = await f.read(self._buffer_size)
                if not block:
                    break
                state.update(block)
        return state.hexdigest()

    async def describe_parts(
        self,
        file_path: Path,
        file_size: int,
        chunking: ChunkingStrategy
    ) -> List[FilePart]:
        """
        Split a file into hashed part descriptors.

        Args:
            file_path: Path to the file
            file_size: Size of the file in bytes
            chunking: Chunk boundary strategy

        Returns:
            Parts in increasing offset order
        """
        parts = []
        async with aiofiles.open(file_path, 'rb') as f:
            for start, end in chunking.calculate_chunks(file_size):
                data = await read_stream_range(f, start, end - start)
                parts.append(FilePart(offset=start, size=end - start, hash=self._hasher.hash_bytes(data)))

        self._logger.debug(f"Described {len(parts)} parts for {file_path.name}")
        return parts
