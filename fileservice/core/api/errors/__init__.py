"""File service error bodies."""
from .error_response import ErrorResponse

__all__ = [
    'ErrorResponse',
]
