"""Request metadata for the audit trail, carried in a contextvar.

Populated by RequestContextMiddleware and read by AuditService and the
tenant-switch log, so services never need the transport request object.
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass

MAX_USER_AGENT_LENGTH = 500

_audit_context: ContextVar["AuditContext | None"] = ContextVar("audit_context", default=None)


@dataclass(frozen=True)
class AuditContext:
    """Immutable audit context for the current request."""

    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None


def set_audit_context(
    ip_address: str | None = None,
    user_agent: str | None = None,
    request_id: str | None = None,
) -> Token["AuditContext | None"]:
    """Set audit context for the current request and return the reset token."""
    ctx = AuditContext(
        ip_address=ip_address,
        user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
        request_id=request_id,
    )
    return _audit_context.set(ctx)


def get_audit_context() -> AuditContext | None:
    return _audit_context.get()


def reset_audit_context(token: Token["AuditContext | None"]) -> None:
    _audit_context.reset(token)


def get_client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """Extract client IP from X-Forwarded-For header or client host.

    The first address of X-Forwarded-For is the original client.
    """
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return client_host
