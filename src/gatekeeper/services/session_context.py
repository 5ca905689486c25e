"""Everything a session token needs besides the principal itself.

Login, 2FA completion, refresh and tenant switch all recompute this from the
stores; nothing is carried over from a previous token.
"""

import asyncio
from dataclasses import dataclass, field
from uuid import UUID

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.models.public import Tenant
from src.gatekeeper.models.tenant import User
from src.gatekeeper.repositories.public import TenantAccessRepository
from src.gatekeeper.repositories.tenant import CompanyRepository
from src.gatekeeper.schemas.auth import (
    CompanySummary,
    LoginResponse,
    TenantSummary,
    TokenPair,
    UserSummary,
)
from src.gatekeeper.schemas.tenant_group import TenantGroupRead
from src.gatekeeper.services.permission_aggregator import PermissionAggregator


@dataclass(frozen=True)
class SessionContext:
    permissions: frozenset[str]
    companies: list[CompanySummary] = field(default_factory=list)
    tenant_group_id: UUID | None = None
    available_tenant_ids: list[UUID] = field(default_factory=list)

    @property
    def primary_company_id(self) -> UUID | None:
        return next((c.id for c in self.companies if c.is_primary), None)


class SessionContextLoader:
    def __init__(self, router: ConnectionRouter, aggregator: PermissionAggregator | None = None):
        self.router = router
        self.aggregator = aggregator or PermissionAggregator(router)

    async def companies(self, tenant: Tenant, user_id: UUID) -> list[CompanySummary]:
        async with self.router.tenant(tenant) as session:
            pairs = await CompanyRepository(session).list_for_user(user_id)
        return [
            CompanySummary(id=company.id, name=company.name, is_primary=is_primary)
            for company, is_primary in pairs
        ]

    async def tenant_group_id(self, email: str, tenant_id: UUID) -> UUID | None:
        """Group of the oldest open grant for `email` on `tenant_id`."""
        async with self.router.directory() as session:
            return await TenantAccessRepository(session).get_group_id(email, tenant_id)

    async def available_tenant_ids(self, email: str) -> list[UUID]:
        """Distinct accessible tenant ids in display order."""
        async with self.router.directory() as session:
            rows = await TenantAccessRepository(session).list_available(email)
        ids: list[UUID] = []
        for access, *_ in rows:
            if access.tenant_id not in ids:
                ids.append(access.tenant_id)
        return ids

    async def load(self, tenant: Tenant, user: User) -> SessionContext:
        """Independent lookups run concurrently, each on its own session."""
        permissions, companies, tenant_group_id, available = await asyncio.gather(
            self.aggregator.effective_permissions(tenant, user.id),
            self.companies(tenant, user.id),
            self.tenant_group_id(user.email, tenant.id),
            self.available_tenant_ids(user.email),
        )
        return SessionContext(
            permissions=frozenset(permissions),
            companies=companies,
            tenant_group_id=tenant_group_id,
            available_tenant_ids=available,
        )


def build_login_response(
    user: User,
    tenant: Tenant,
    context: SessionContext,
    tokens: TokenPair,
    tenant_groups: list[TenantGroupRead],
) -> LoginResponse:
    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserSummary.model_validate(user),
        tenant=TenantSummary.model_validate(tenant),
        companies=context.companies,
        tenant_groups=tenant_groups,
    )
