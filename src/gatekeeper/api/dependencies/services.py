"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.services.auth_service import AuthService


def get_connection_router(request: Request) -> ConnectionRouter:
    """Router installed on the application by create_app()."""
    return request.app.state.connection_router  # type: ignore[no-any-return]


def get_auth_service(request: Request) -> AuthService:
    """Get auth service bound to the application's router and notifier."""
    return AuthService(
        get_connection_router(request),
        notifier=request.app.state.notifier,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
