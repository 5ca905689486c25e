"""Authentication dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from src.gatekeeper.api.dependencies.services import AuthServiceDep
from src.gatekeeper.core.exceptions import TokenInvalidOrExpiredError
from src.gatekeeper.core.logging import bind_user_context
from src.gatekeeper.services.token_service import AuthenticatedPrincipal


def get_bearer_token(authorization: Annotated[str | None, Header()] = None) -> str:
    """Extract the raw token from an `Authorization: Bearer <token>` header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise TokenInvalidOrExpiredError("Missing or invalid authorization header")
    token = authorization[7:].strip()
    if not token:
        raise TokenInvalidOrExpiredError("Missing or invalid authorization header")
    return token


BearerToken = Annotated[str, Depends(get_bearer_token)]


async def get_current_principal(
    token: BearerToken, service: AuthServiceDep
) -> AuthenticatedPrincipal:
    """Verify the access token and bind the principal to the log context."""
    principal = await service.authenticate(token)
    bind_user_context(
        principal.user.id,
        principal.tenant.id,
        tenant_slug=principal.tenant.slug,
        email=principal.user.email,
    )
    return principal


CurrentPrincipal = Annotated[AuthenticatedPrincipal, Depends(get_current_principal)]
