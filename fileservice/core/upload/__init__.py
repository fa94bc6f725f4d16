"""
Upload module for resumable chunked uploads.

Three protocol operations (probe, session negotiation, part transfer) and
a coordinator that runs them in sequence for a whole file.
"""
from .coordinator import UploadCoordinator
from .models import (
    FilePart,
    UploadSession,
    CheckFileResult,
    CreateSessionResult,
    UploadStreamResult,
    UploadConfig,
    UploadProgress,
    UploadResult
)
from .services import ExistenceProber, SessionNegotiator, PartTransmitter
from .protocols import ChunkingStrategy, HashStrategy, ByteStream

__all__ = [
    # Main classes
    'UploadCoordinator',
    'ExistenceProber',
    'SessionNegotiator',
    'PartTransmitter',
    
    # Models
    'FilePart',
    'UploadSession',
    'CheckFileResult',
    'CreateSessionResult',
    'UploadStreamResult',
    'UploadConfig',
    'UploadProgress',
    'UploadResult',
    
    # Protocols
    'ChunkingStrategy',
    'HashStrategy',
    'ByteStream',
]
