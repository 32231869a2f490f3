"""
Custom exceptions for the application.
"""
from typing import Any, Dict, Optional


class LoginGuardException(Exception):
    """Base exception for all LoginGuard exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(LoginGuardException):
    """Invalid or missing configuration."""

    def __init__(self, message: str, setting: Optional[str] = None):
        details = {"setting": setting} if setting else {}
        super().__init__(message, status_code=500, details=details)


class VerifierNotConfiguredError(LoginGuardException):
    """No credential verifier has been wired into the application."""

    def __init__(self, message: str = "Credential verification is not available"):
        super().__init__(message, status_code=503)
