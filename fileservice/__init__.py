"""
fileservice - Async Python client for resumable chunked uploads.

Usage:
    >>> from fileservice import FileServiceClient
    >>>
    >>> async with FileServiceClient(token, "https://mds.example.com/api/") as client:
    ...     result = await client.upload_file("data.csv", resource_id=42)
    ...     print(result.is_complete)
"""
import logging
from .client import FileServiceClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    HttpTransport,
    ErrorResponse,
    NavigatingEvent,
    NavigatedEvent,
    NavigationListener
)

# Upload protocol
from .core.upload import (
    FilePart,
    UploadSession,
    CheckFileResult,
    CreateSessionResult,
    UploadStreamResult,
    UploadConfig,
    UploadProgress,
    UploadResult,
    UploadCoordinator,
    ExistenceProber,
    SessionNegotiator,
    PartTransmitter
)

# Errors
from .core.exceptions import (
    FileServiceException,
    InvalidArgumentError,
    TransportError,
    RequestTimeoutError,
    UploadError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for fileservice modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'fileservice',
        'fileservice.client',
        'fileservice.api',
        'fileservice.events',
        'fileservice.upload.probe',
        'fileservice.upload.session',
        'fileservice.upload.part',
        'fileservice.upload.file',
        'fileservice.upload.coordinator',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'FileServiceClient',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'HttpTransport',
    'ErrorResponse',
    'NavigatingEvent',
    'NavigatedEvent',
    'NavigationListener',
    'FilePart',
    'UploadSession',
    'CheckFileResult',
    'CreateSessionResult',
    'UploadStreamResult',
    'UploadConfig',
    'UploadProgress',
    'UploadResult',
    'UploadCoordinator',
    'ExistenceProber',
    'SessionNegotiator',
    'PartTransmitter',
    'FileServiceException',
    'InvalidArgumentError',
    'TransportError',
    'RequestTimeoutError',
    'UploadError',
    'setup_logging',
]
