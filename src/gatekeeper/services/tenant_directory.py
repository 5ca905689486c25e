"""Tenant resolution against the directory."""

from uuid import UUID

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.security import is_valid_tenant_slug
from src.gatekeeper.models.public import Tenant
from src.gatekeeper.repositories.public import TenantRepository


def email_domain(identifier: str) -> str | None:
    """Domain part of an email address, lowercased; None if there is no '@'."""
    _, at, domain = identifier.strip().rpartition("@")
    if not at or not domain:
        return None
    return domain.lower()


class TenantDirectory:
    """Resolves tenant identifiers to active tenants.

    Returns None for unknown, inactive or deleted tenants and never raises for
    them; callers must answer exactly as they would for bad credentials.
    """

    def __init__(self, router: ConnectionRouter):
        self.router = router

    async def resolve(self, slug: str | None, email: str) -> Tenant | None:
        """Find a tenant by explicit slug, else by the domain of `email`."""
        if slug and not is_valid_tenant_slug(slug):
            return None
        async with self.router.directory() as session:
            repo = TenantRepository(session)
            if slug:
                return await repo.get_active_by_slug(slug)

            domain = email_domain(email)
            if domain is None:
                return None
            return await repo.get_active_by_domain(domain)

    async def get_active(self, tenant_id: UUID) -> Tenant | None:
        async with self.router.directory() as session:
            return await TenantRepository(session).get_active_by_id(tenant_id)
