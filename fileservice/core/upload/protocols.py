"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
"""
from typing import Protocol, List, Tuple, Optional, Union, Awaitable


class ChunkingStrategy(Protocol):
    """
    Protocol for file chunking strategies.
    
    Allows different chunking algorithms to be plugged in.
    """
    
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate chunk boundaries for a file.
        
        Args:
            file_size: Total file size in bytes
            
        Returns:
            List of (start, end) tuples representing chunk boundaries
        """
        ...


class HashStrategy(Protocol):
    """Protocol for part checksum algorithms."""
    
    def new(self) -> 'HashState':
        """Start an incremental hash."""
        ...
    
    def hash_bytes(self, data: bytes) -> str:
        """Return the checksum text for a buffer."""
        ...


class HashState(Protocol):
    """Incremental hash object (pycryptodome / hashlib style)."""
    
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class ByteStream(Protocol):
    """
    Seekable binary stream the parts are read from.
    
    Both plain binary files and aiofiles handles fit: their methods either
    return values directly or return awaitables.
    """
    
    def seek(self, offset: int, whence: int = 0) -> Union[int, Awaitable[int]]: ...
    def read(self, size: int = -1) -> Union[bytes, Awaitable[bytes]]: ...

