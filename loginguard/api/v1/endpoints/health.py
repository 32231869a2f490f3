"""
Health check endpoints.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from loginguard.core.dependencies import get_lockout_tracker
from loginguard.services.security.lockout import LockoutTracker

router = APIRouter()


@router.get("/health")
async def health_check(
    request: Request,
    tracker: LockoutTracker = Depends(get_lockout_tracker),
) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        Health status
    """
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": "loginguard-api",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "tracked_identifiers": tracker.tracked_count,
        "verifier_configured": getattr(request.app.state, "login_service", None) is not None,
    }
