"""
Dependency injection for FastAPI.
"""
from fastapi import Request

from loginguard.core.exceptions import VerifierNotConfiguredError
from loginguard.services.auth.login_service import LoginService
from loginguard.services.security.lockout import LockoutTracker


def get_lockout_tracker(request: Request) -> LockoutTracker:
    """
    Get the application's lockout tracker.

    Args:
        request: Incoming request

    Returns:
        Lockout tracker owned by the application
    """
    return request.app.state.lockout_tracker


def get_login_service(request: Request) -> LoginService:
    """
    Get the application's login service.

    Raises:
        VerifierNotConfiguredError: If no credential verifier was wired in
    """
    service = getattr(request.app.state, "login_service", None)
    if service is None:
        raise VerifierNotConfiguredError()
    return service
