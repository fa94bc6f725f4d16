"""
Custom exceptions for file service operations.

Only caller mistakes and transport-level failures are raised. Every answer
the server actually gives (found, missing, rejected, failed part) comes back
as a typed result instead.
"""
from typing import Optional


class FileServiceException(Exception):
    """Base exception for all file service errors."""
    
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status_code: HTTP status code (if a response was obtained)
        """
        self.status_code = status_code
        super().__init__(message)


class InvalidArgumentError(FileServiceException, ValueError):
    """Raised for malformed caller input, before any network activity."""
    
    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"{argument}: {message}")


class TransportError(FileServiceException):
    """Raised when no HTTP response could be obtained."""
    
    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        uri: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            method: HTTP method of the failed request
            uri: Target address of the failed request
        """
        self.method = method
        self.uri = uri
        super().__init__(message)


class RequestTimeoutError(TransportError):
    """Raised when the configured request timeout elapses."""
    pass


class UploadError(FileServiceException):
    """Raised by convenience helpers when an orchestrated upload does not complete."""
    
    def __init__(self, message: str, result=None, status_code: Optional[int] = None) -> None:
        self.result = result
        super().__init__(message, status_code)
