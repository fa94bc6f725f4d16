"""Upload models."""
from .upload_models import (
    FilePart,
    UploadSession,
    CheckFileResult,
    CreateSessionResult,
    UploadStreamResult,
    UploadConfig,
    UploadProgress,
    UploadResult
)

__all__ = [
    'FilePart',
    'UploadSession',
    'CheckFileResult',
    'CreateSessionResult',
    'UploadStreamResult',
    'UploadConfig',
    'UploadProgress',
    'UploadResult'
]
