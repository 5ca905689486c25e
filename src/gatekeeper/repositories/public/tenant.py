"""Repositories for the tenant registry and module activation."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select

from src.gatekeeper.models.base import utc_now
from src.gatekeeper.models.public import Module, Tenant, TenantModule
from src.gatekeeper.repositories.base import BaseRepository


def _active_tenants():  # type: ignore[no-untyped-def]
    return select(Tenant).where(
        Tenant.is_active == True,  # noqa: E712
        Tenant.deleted_at.is_(None),  # type: ignore[union-attr]
    )


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entity in public schema."""

    model = Tenant

    async def get_active_by_slug(self, slug: str) -> Tenant | None:
        result = await self.session.execute(_active_tenants().where(Tenant.slug == slug))
        return result.scalar_one_or_none()

    async def get_active_by_id(self, tenant_id: UUID) -> Tenant | None:
        result = await self.session.execute(_active_tenants().where(Tenant.id == tenant_id))
        return result.scalar_one_or_none()

    async def get_active_by_domain(self, domain: str) -> Tenant | None:
        """Get the tenant whose slug or custom domain equals an email domain."""
        result = await self.session.execute(
            _active_tenants()
            .where(or_(Tenant.slug == domain, Tenant.custom_domain == domain))
            .order_by(Tenant.created_at)
            .limit(1)
        )
        return result.scalars().first()


class ModuleActivationRepository(BaseRepository[TenantModule]):
    """Repository for TenantModule activations in public schema."""

    model = TenantModule

    async def list_active_codes(self, tenant_id: UUID, now: datetime | None = None) -> set[str]:
        """Codes of modules enabled, not deleted and not expired for a tenant."""
        now = now or utc_now()
        result = await self.session.execute(
            select(Module.code)
            .join(TenantModule, TenantModule.module_id == Module.id)  # type: ignore[arg-type]
            .where(
                TenantModule.tenant_id == tenant_id,
                TenantModule.is_enabled == True,  # noqa: E712
                TenantModule.deleted_at.is_(None),  # type: ignore[union-attr]
                or_(
                    TenantModule.expires_at.is_(None),  # type: ignore[union-attr]
                    TenantModule.expires_at > now,  # type: ignore[operator]
                ),
            )
        )
        return set(result.scalars().all())
