"""Logging configuration using structlog."""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Event keys that must never reach a log sink in clear text
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "current_password",
        "new_password",
        "secret",
        "two_factor_secret",
        "code",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
    }
)
REDACTED = "[REDACTED]"


def redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor replacing credential-bearing fields with a placeholder."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(debug: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: If True, use colored console output. If False, use JSON for production.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_sensitive_fields,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Quiet the drivers; their statements may carry bound parameters
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind request-level context to all subsequent log calls.

    Args:
        request_id: The correlation ID for the current request.
    """
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(
    user_id: UUID,
    tenant_id: UUID,
    tenant_slug: str | None = None,
    email: str | None = None,
) -> None:
    """Bind the authenticated principal to all subsequent log calls.

    Args:
        user_id: The principal's ID inside its tenant store.
        tenant_id: The tenant the access token was issued for.
        tenant_slug: Optional tenant slug, handy when reading logs by hand.
        email: Only logged if settings.log_user_emails is True (GDPR compliance).
    """
    from src.gatekeeper.core.config import get_settings

    bind_contextvars(
        user_id=str(user_id),
        tenant_id=str(tenant_id),
    )
    if tenant_slug:
        bind_contextvars(tenant_slug=tenant_slug)
    settings = get_settings()
    if email and settings.log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()
