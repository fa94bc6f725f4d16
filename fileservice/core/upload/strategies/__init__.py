"""Upload strategies module."""
from .chunking import BaseChunkingStrategy, FixedSizeChunkingStrategy
from .hashing import MD5HashStrategy

__all__ = [
    'BaseChunkingStrategy',
    'FixedSizeChunkingStrategy',
    'MD5HashStrategy',
]
