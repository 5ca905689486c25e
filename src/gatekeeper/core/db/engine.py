"""The process-wide async engine shared by the directory and every tenant store."""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.gatekeeper.core.config import Settings, get_settings

_engine: AsyncEngine | None = None


def _ssl_context(mode: str) -> ssl.SSLContext | None:
    """Map a libpq-style sslmode onto an SSLContext for asyncpg."""
    if mode == "disable":
        return None
    context = ssl.create_default_context()
    if mode in ("prefer", "require"):
        # Encrypted, certificate not checked
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif mode in ("verify-ca", "verify-full"):
        context.check_hostname = mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    return context


def build_engine(settings: Settings) -> AsyncEngine:
    connect_args: dict[str, Any] = {
        "statement_cache_size": settings.database_statement_cache_size,
    }
    context = _ssl_context(settings.database_ssl_mode)
    if context is not None:
        connect_args["ssl"] = context

    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings())
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections. Called from the application lifespan."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
