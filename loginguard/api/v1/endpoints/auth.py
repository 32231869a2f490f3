"""
Authentication endpoints.
"""
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from loginguard.core.dependencies import get_login_service
from loginguard.core.logging import bind_login_context
from loginguard.domain.schemas.auth import LoginFailureResponse, LoginRequest
from loginguard.services.auth.login_service import LoginService

router = APIRouter()


@router.post(
    "/login",
    responses={
        403: {
            "model": LoginFailureResponse,
            "description": "Wrong credentials, or too many failed attempts",
        },
    },
)
async def login(
    credentials: LoginRequest,
    request: Request,
    login_service: LoginService = Depends(get_login_service),
) -> Any:
    """
    Login with an account identifier and secret.

    - Rejects locked-out identifiers without checking credentials
    - Counts failed attempts per identifier
    - Returns the credential verifier's payload on success
    """
    client_ip = request.client.host if request.client else None
    bind_login_context(credentials.identifier, client_ip)

    outcome = await login_service.login(
        identifier=credentials.identifier,
        secret=credentials.secret,
        client_ip=client_ip,
    )

    if not outcome.ok:
        return JSONResponse(
            status_code=outcome.status_code,
            content=outcome.to_response_body(),
        )

    return outcome.result
