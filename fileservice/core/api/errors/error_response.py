"""Structured error bodies returned by the file service."""
import json
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ErrorResponse:
    """
    Parsed error body.
    
    Attributes:
        raw: Response body exactly as received
        error_code: Machine-readable 'ErrorCode' value, if the body has one
        message: Human-readable 'Message' value, if the body has one
    """
    raw: str
    error_code: Optional[str] = None
    message: Optional[str] = None
    
    @classmethod
    def parse(cls, body: str) -> 'ErrorResponse':
        """
        Parse an error body without assuming it is JSON.
        
        Args:
            body: Raw response text
            
        Returns:
            ErrorResponse; fields that cannot be found are None
        """
        try:
            data = json.loads(body) if body else None
        except ValueError:
            return cls(raw=body)
        
        if not isinstance(data, dict):
            return cls(raw=body)
        
        return cls(
            raw=body,
            error_code=_as_text(data.get('ErrorCode')),
            message=_as_text(data.get('Message'))
        )


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)
