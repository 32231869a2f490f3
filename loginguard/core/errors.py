"""
Standardized login error catalog for LoginGuard.

Both login failure kinds share the same HTTP status so that a locked-out
account and a wrong password look alike to the client apart from the
message and attempt count.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Client-facing login failure kinds."""

    TOO_MANY_ATTEMPTS = "too_many_attempts"
    INVALID_CREDENTIALS = "invalid_credentials"


class ErrorMessages:
    """Centralized error message definitions."""

    _messages: Dict[ErrorKind, str] = {
        ErrorKind.TOO_MANY_ATTEMPTS: "Too many failed login attempts.",
        ErrorKind.INVALID_CREDENTIALS: "Wrong email or password.",
    }

    _status_codes: Dict[ErrorKind, int] = {
        ErrorKind.TOO_MANY_ATTEMPTS: 403,
        ErrorKind.INVALID_CREDENTIALS: 403,
    }

    @classmethod
    def get(cls, kind: ErrorKind) -> str:
        """Get the client message for an error kind."""
        return cls._messages.get(kind, "An error occurred")

    @classmethod
    def status_code(cls, kind: ErrorKind) -> int:
        """Get the HTTP status for an error kind."""
        return cls._status_codes.get(kind, 400)


class ErrorResponse:
    """Standardized error response structure."""

    def __init__(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.data = data

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        response: Dict[str, Any] = {"message": self.message}
        if self.data is not None:
            response["data"] = self.data
        return response

    @classmethod
    def for_kind(
        cls,
        kind: ErrorKind,
        data: Optional[Dict[str, Any]] = None,
    ) -> "ErrorResponse":
        """Create a login failure response."""
        return cls(message=ErrorMessages.get(kind), data=data)
