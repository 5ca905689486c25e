"""Request-scoped context for logs and the audit trail.

Runs inside CorrelationIdMiddleware, so the request id is already known.
"""

from asgi_correlation_id import correlation_id
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.gatekeeper.core.audit_context import (
    get_client_ip,
    reset_audit_context,
    set_audit_context,
)
from src.gatekeeper.core.logging import bind_request_context, clear_request_context


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds the request id to structlog and the client metadata to the audit context.

    Both are cleared when the response is produced.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = correlation_id.get()
        clear_request_context()
        bind_request_context(request_id)

        token = set_audit_context(
            ip_address=get_client_ip(
                request.headers.get("x-forwarded-for"),
                request.client.host if request.client else None,
            ),
            user_agent=request.headers.get("user-agent"),
            request_id=request_id,
        )
        try:
            return await call_next(request)
        finally:
            reset_audit_context(token)
            clear_request_context()
