from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from src.gatekeeper.api.middlewares import setup_middlewares
from src.gatekeeper.api.v1.router import api_router
from src.gatekeeper.core.config import get_settings
from src.gatekeeper.core.db import ConnectionRouter, SchemaConnectionRouter, dispose_engine
from src.gatekeeper.core.exceptions import setup_exception_handlers
from src.gatekeeper.core.logging import get_logger, setup_logging
from src.gatekeeper.core.notifications import (
    NotificationSender,
    ResendNotificationSender,
    drain_notifications,
)
from src.gatekeeper.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}")

    yield

    logger.info("Closing connections...")
    await drain_notifications()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Login, second factor, tokens, tenant switching"},
]


def create_app(
    connection_router: ConnectionRouter | None = None,
    notifier: NotificationSender | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        connection_router: Store routing; defaults to schema-per-tenant PostgreSQL.
        notifier: Outbound email; defaults to Resend.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant authentication and authorization API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    app.state.connection_router = connection_router or SchemaConnectionRouter()
    app.state.notifier = notifier or ResendNotificationSender()

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Liveness plus a directory round trip."""
        try:
            async with app.state.connection_router.directory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Health check failed", error=str(e))
            return JSONResponse(
                content={"status": "unhealthy", "database": "unreachable"}, status_code=503
            )
        return JSONResponse(content={"status": "healthy", "database": "healthy"})

    return app


app = create_app()
