"""
Structured logging configuration using structlog.

Lockout and login events are logged with the account identifier bound into
the structlog context, so every line written while handling a login request
can be traced back to the identifier and client address. Credential
material is masked before rendering.
"""
import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.contextvars import bind_contextvars
from structlog.typing import EventDict, WrappedLogger

from loginguard.core.config import Settings, settings as default_settings

REDACTED = "[REDACTED]"

# Keys that may carry credential material (request bodies, verifier kwargs)
SENSITIVE_KEYS = frozenset({"secret", "password", "credentials", "token"})


def redact_credentials(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask credential material wherever it was passed as a log field."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structured logging for the application.
    """
    settings = settings or default_settings
    level = logging.DEBUG if settings.DEBUG else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        redact_credentials,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_development:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (usually __name__ of the module)
    """
    return structlog.get_logger(name)


def bind_login_context(identifier: str, client_ip: str | None = None) -> Dict[str, Any]:
    """
    Bind the login identifier (and client address) to the logging context.

    Lockout tracker and audit lines emitted for the rest of the request then
    carry the same fields as the request log.

    Returns:
        The bound context
    """
    context = login_context(identifier, client_ip)
    bind_contextvars(**context)
    return context


def login_context(identifier: str | None, client_ip: str | None = None) -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    if identifier:
        context["identifier"] = identifier
    if client_ip:
        context["client_ip"] = client_ip
    return context


def log_request_details(
    request_id: str,
    method: str,
    path: str,
    client_ip: str | None = None,
    identifier: str | None = None,
) -> Dict[str, Any]:
    """
    Create a context dict for request logging.

    Args:
        request_id: Unique request identifier
        method: HTTP method
        path: Request path
        client_ip: Client IP address
        identifier: Account identifier, once the login body has been parsed
    """
    return {
        "request_id": request_id,
        "method": method,
        "path": path,
        **login_context(identifier, client_ip),
    }


def log_error_details(
    error: Exception,
    identifier: str | None = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """
    Create a context dict for error logging.

    The request ID is already bound by the request middleware; pass the
    identifier when the error concerns a specific account.
    """
    context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }
    context.update(login_context(identifier))
    return context
