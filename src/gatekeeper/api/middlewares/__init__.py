"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.gatekeeper.core.config import Settings

from .request_context import RequestContextMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "setup_middlewares",
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install middlewares, innermost first.

    Order on the way in: correlation id, CORS, security headers, request context.
    """
    app.add_middleware(RequestContextMiddleware)

    csp = None if settings.enable_openapi else SecurityHeadersMiddleware.PRODUCTION_CSP
    app.add_middleware(SecurityHeadersMiddleware, content_security_policy=csp)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    app.add_middleware(CorrelationIdMiddleware)
