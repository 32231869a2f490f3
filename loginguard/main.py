"""
LoginGuard API - Main application entry point.
"""
import asyncio
import contextlib
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from structlog.contextvars import bind_contextvars, clear_contextvars

from loginguard.api.v1.router import api_router
from loginguard.core.config import Settings, get_settings
from loginguard.core.exceptions import LoginGuardException
from loginguard.core.logging import (
    get_logger,
    log_error_details,
    log_request_details,
    setup_logging,
)
from loginguard.domain.interfaces.credentials import (
    ICredentialVerifier,
    load_credential_verifier,
)
from loginguard.services.auth.login_service import LoginService
from loginguard.services.security.audit import AuditLogger
from loginguard.services.security.lockout import LockoutTracker

logger = get_logger(__name__)


async def run_lockout_sweeper(tracker: LockoutTracker, interval_seconds: float) -> None:
    """Periodically drop lockout records that can no longer lock anyone out."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await tracker.purge_expired()
        except Exception as exc:
            logger.error("Lockout sweep failed", **log_error_details(exc))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        "Starting LoginGuard API",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        verifier_configured=app.state.login_service is not None,
        **app.state.settings.get_lockout_config(),
    )

    sweeper = None
    if settings.LOCKOUT_SWEEP_INTERVAL_SECONDS > 0:
        sweeper = asyncio.create_task(
            run_lockout_sweeper(app.state.lockout_tracker, settings.LOCKOUT_SWEEP_INTERVAL_SECONDS)
        )

    yield

    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    logger.info("Shutting down LoginGuard API")


def create_app(
    settings: Optional[Settings] = None,
    credential_verifier: Optional[ICredentialVerifier] = None,
    tracker: Optional[LockoutTracker] = None,
    audit: Optional[AuditLogger] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to the cached settings)
        credential_verifier: Verifier to use instead of CREDENTIAL_VERIFIER
        tracker: Lockout tracker (defaults to one built from settings)
        audit: Audit logger (defaults to one built from settings)

    Returns:
        Configured application
    """
    settings = settings or get_settings()

    if credential_verifier is None and settings.CREDENTIAL_VERIFIER:
        credential_verifier = load_credential_verifier(settings.CREDENTIAL_VERIFIER)

    tracker = tracker or LockoutTracker.from_settings(settings)
    audit = audit or AuditLogger(buffer_size=settings.AUDIT_BUFFER_SIZE)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json" if not settings.is_production else None,
        docs_url=f"{settings.API_V1_PREFIX}/docs" if not settings.is_production else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.lockout_tracker = tracker
    app.state.audit_logger = audit
    app.state.login_service = (
        LoginService(tracker=tracker, verifier=credential_verifier, audit=audit)
        if credential_verifier is not None
        else None
    )

    if credential_verifier is None:
        logger.warning("No credential verifier configured; login requests will be refused")

    # Add request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add unique request ID to each request."""
        request_id = request.headers.get("X-Request-ID", str(time.time_ns()))

        # Bind request ID to logging context
        clear_contextvars()
        bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # Add request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing information."""
        start_time = time.time()

        logger.info(
            "Request started",
            **log_request_details(
                request_id=request.headers.get("X-Request-ID", ""),
                method=request.method,
                path=request.url.path,
                client_ip=request.client.host if request.client else None,
            ),
        )

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        return response

    @app.exception_handler(LoginGuardException)
    async def loginguard_exception_handler(request: Request, exc: LoginGuardException):
        """Render application errors with the standard error envelope."""
        logger.warning(
            "Request failed",
            **log_error_details(exc, path=request.url.path, status_code=exc.status_code),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "data": exc.details or None},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )

        # Don't expose internal errors in production
        if settings.is_production:
            return JSONResponse(
                status_code=500,
                content={"detail": "An internal error occurred"},
            )

        return JSONResponse(
            status_code=500,
            content={"detail": str(exc)},
        )

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Root endpoint
    @app.get("/")
    async def root() -> Dict[str, Any]:
        """
        Root endpoint.

        Returns:
            API information
        """
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": f"{settings.API_V1_PREFIX}/docs" if not settings.is_production else "Disabled in production",
        }

    return app


def init_sentry(settings: Settings) -> None:
    """Initialize Sentry error reporting if configured."""
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENVIRONMENT or settings.ENVIRONMENT,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        )


# Setup logging
setup_logging()
init_sentry(get_settings())

# Create FastAPI application
app = create_app()
