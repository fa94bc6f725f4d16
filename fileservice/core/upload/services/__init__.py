"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader, read_stream_range
from .probe_service import ExistenceProber
from .session_service import SessionNegotiator
from .part_service import PartTransmitter, build_part_body, part_headers

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'read_stream_range',
    'ExistenceProber',
    'SessionNegotiator',
    'PartTransmitter',
    'build_part_body',
    'part_headers',
]
