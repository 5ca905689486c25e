"""Repositories for cross-tenant access grants and the switch log."""

from typing import Any
from uuid import UUID

from sqlalchemy import and_, update
from sqlalchemy.engine import Row
from sqlmodel import select

from src.gatekeeper.models.base import utc_now
from src.gatekeeper.models.public import (
    Tenant,
    TenantGroup,
    TenantGroupMember,
    TenantSwitchLog,
    UserTenantAccess,
)
from src.gatekeeper.repositories.base import BaseRepository, email_equals


class TenantAccessRepository(BaseRepository[UserTenantAccess]):
    """Repository for UserTenantAccess grants in public schema."""

    model = UserTenantAccess

    def _open_grants(self, email: str):  # type: ignore[no-untyped-def]
        return (
            email_equals(UserTenantAccess.email, email),
            UserTenantAccess.can_access == True,  # noqa: E712
            UserTenantAccess.revoked_at.is_(None),  # type: ignore[union-attr]
        )

    async def list_available(self, email: str) -> list[Row[Any]]:
        """Rows of (grant, tenant, group, member) for every tenant the email may access.

        Ordered by member display order then tenant name.
        """
        query = (
            select(UserTenantAccess, Tenant, TenantGroup, TenantGroupMember)
            .join(Tenant, Tenant.id == UserTenantAccess.tenant_id)  # type: ignore[arg-type]
            .join(TenantGroup, TenantGroup.id == UserTenantAccess.tenant_group_id)  # type: ignore[arg-type]
            .join(
                TenantGroupMember,
                and_(
                    TenantGroupMember.tenant_id == Tenant.id,  # type: ignore[arg-type]
                    TenantGroupMember.tenant_group_id == TenantGroup.id,  # type: ignore[arg-type]
                ),
            )
            .where(
                *self._open_grants(email),
                Tenant.is_active == True,  # noqa: E712
                Tenant.deleted_at.is_(None),  # type: ignore[union-attr]
                TenantGroup.is_active == True,  # noqa: E712
                TenantGroupMember.is_active == True,  # noqa: E712
            )
            .order_by(TenantGroupMember.display_order, Tenant.name)
        )
        result = await self.session.execute(query)
        return list(result.all())

    async def has_switch_grant(self, email: str, tenant_id: UUID) -> bool:
        result = await self.session.execute(
            select(UserTenantAccess.id)
            .join(Tenant, Tenant.id == UserTenantAccess.tenant_id)  # type: ignore[arg-type]
            .where(
                *self._open_grants(email),
                UserTenantAccess.tenant_id == tenant_id,
                UserTenantAccess.can_switch == True,  # noqa: E712
                Tenant.is_active == True,  # noqa: E712
                Tenant.deleted_at.is_(None),  # type: ignore[union-attr]
            )
            .limit(1)
        )
        return result.scalars().first() is not None

    async def get_group_id(self, email: str, tenant_id: UUID) -> UUID | None:
        result = await self.session.execute(
            select(UserTenantAccess.tenant_group_id)
            .where(*self._open_grants(email), UserTenantAccess.tenant_id == tenant_id)
            .order_by(UserTenantAccess.granted_at)
            .limit(1)
        )
        return result.scalars().first()

    async def revoke(self, email: str, tenant_id: UUID) -> int:
        """Revoke every open grant for the email on the tenant. Returns rows revoked."""
        return await self._execute_update(
            update(UserTenantAccess)
            .where(
                email_equals(UserTenantAccess.email, email),
                UserTenantAccess.tenant_id == tenant_id,  # type: ignore[arg-type]
                UserTenantAccess.revoked_at.is_(None),  # type: ignore[union-attr]
            )
            .values(can_access=False, revoked_at=utc_now())
        )


class TenantSwitchLogRepository(BaseRepository[TenantSwitchLog]):
    """Repository for TenantSwitchLog entries in public schema."""

    model = TenantSwitchLog

    async def list_by_email(self, email: str, limit: int = 50) -> list[TenantSwitchLog]:
        result = await self.session.execute(
            select(TenantSwitchLog)
            .where(email_equals(TenantSwitchLog.email, email))
            .order_by(TenantSwitchLog.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return list(result.scalars().all())
