"""Access and refresh token issuance and verification."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.exceptions import TokenInvalidOrExpiredError
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
)
from src.gatekeeper.models.public import Tenant
from src.gatekeeper.models.tenant import User
from src.gatekeeper.repositories.tenant import UserRepository
from src.gatekeeper.schemas.auth import AccessClaims, TokenPair
from src.gatekeeper.services.session_context import SessionContext, SessionContextLoader
from src.gatekeeper.services.tenant_directory import TenantDirectory

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """A verified access token together with the live rows it refers to."""

    claims: AccessClaims
    tenant: Tenant
    user: User


def build_access_claims(user: User, tenant: Tenant, context: SessionContext) -> dict[str, Any]:
    primary = context.primary_company_id
    return {
        "sub": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "is_admin": user.is_admin,
        "tenant_id": str(tenant.id),
        "tenant_slug": tenant.slug,
        "tenant_group_id": str(context.tenant_group_id) if context.tenant_group_id else None,
        "available_tenants": [str(tenant_id) for tenant_id in context.available_tenant_ids],
        "companies": [str(company.id) for company in context.companies],
        "primary_company": str(primary) if primary else None,
        "permissions": sorted(context.permissions),
    }


class TokenIssuer:
    """Mints token pairs and turns presented tokens back into live principals.

    The access token carries a permission snapshot; `refresh` always
    recomputes it, so a revoked permission disappears at the next refresh.
    """

    def __init__(
        self,
        router: ConnectionRouter,
        directory: TenantDirectory,
        loader: SessionContextLoader,
    ):
        self.router = router
        self.directory = directory
        self.loader = loader

    def issue(self, user: User, tenant: Tenant, context: SessionContext) -> TokenPair:
        return TokenPair(
            access_token=create_access_token(build_access_claims(user, tenant, context)),
            refresh_token=create_refresh_token(str(user.id), str(tenant.id)),
        )

    async def _resolve(self, tenant_id: Any, user_id: Any) -> tuple[Tenant, User]:
        try:
            tenant_uuid = UUID(str(tenant_id))
            user_uuid = UUID(str(user_id))
        except ValueError:
            raise TokenInvalidOrExpiredError() from None

        tenant = await self.directory.get_active(tenant_uuid)
        if tenant is None:
            raise TokenInvalidOrExpiredError()

        async with self.router.tenant(tenant) as session:
            user = await UserRepository(session).get_active_by_id(user_uuid)
        if user is None:
            raise TokenInvalidOrExpiredError()
        return tenant, user

    async def refresh(self, refresh_token: str) -> str:
        """Issue a new access token from a refresh token.

        Raises:
            TokenInvalidOrExpiredError: Bad signature, expiry, wrong type, or the
                tenant or principal no longer exists.
        """
        payload = decode_refresh_token(refresh_token)
        if payload is None:
            raise TokenInvalidOrExpiredError()

        tenant, user = await self._resolve(payload.get("tenant_id"), payload.get("sub"))
        context = await self.loader.load(tenant, user)

        logger.info("Access token refreshed", user_id=str(user.id), tenant_id=str(tenant.id))
        return create_access_token(build_access_claims(user, tenant, context))

    async def authenticate(self, access_token: str) -> AuthenticatedPrincipal:
        """Verify an access token and re-resolve its principal."""
        payload = decode_access_token(access_token)
        if payload is None:
            raise TokenInvalidOrExpiredError()

        try:
            claims = AccessClaims.model_validate(payload)
        except ValidationError:
            raise TokenInvalidOrExpiredError() from None

        tenant, user = await self._resolve(claims.tenant_id, claims.sub)
        return AuthenticatedPrincipal(claims=claims, tenant=tenant, user=user)
