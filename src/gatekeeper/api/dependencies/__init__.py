"""FastAPI dependency injection definitions."""

from src.gatekeeper.api.dependencies.auth import (
    BearerToken,
    CurrentPrincipal,
    get_bearer_token,
    get_current_principal,
)
from src.gatekeeper.api.dependencies.services import (
    AuthServiceDep,
    get_auth_service,
    get_connection_router,
)

__all__ = [
    # Auth
    "BearerToken",
    "CurrentPrincipal",
    "get_bearer_token",
    "get_current_principal",
    # Services
    "AuthServiceDep",
    "get_auth_service",
    "get_connection_router",
]
