"""Cross-tenant access groups and tenant switching.

One person may hold separate accounts in several tenant stores. Which of those
tenants they may list or switch into is decided solely by UserTenantAccess rows
in the directory, keyed by email.
"""

import asyncio
from uuid import UUID

from src.gatekeeper.core.audit_context import get_audit_context
from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
)
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.models.enums import AccessLevel
from src.gatekeeper.models.public import AuditAction, TenantSwitchLog, UserTenantAccess
from src.gatekeeper.repositories.public import TenantAccessRepository, TenantSwitchLogRepository
from src.gatekeeper.repositories.tenant import UserRepository
from src.gatekeeper.schemas.auth import LoginResponse
from src.gatekeeper.schemas.tenant_group import AvailableTenant, TenantGroupRead
from src.gatekeeper.services.audit_service import AuditService
from src.gatekeeper.services.session_context import SessionContextLoader, build_login_response
from src.gatekeeper.services.tenant_directory import TenantDirectory
from src.gatekeeper.services.token_service import TokenIssuer

logger = get_logger(__name__)


class TenantGroupService:
    def __init__(
        self,
        router: ConnectionRouter,
        directory: TenantDirectory,
        loader: SessionContextLoader,
        issuer: TokenIssuer,
        audit: AuditService,
    ):
        self.router = router
        self.directory = directory
        self.loader = loader
        self.issuer = issuer
        self.audit = audit

    async def available_tenants(self, email: str) -> list[TenantGroupRead]:
        """Accessible tenants grouped by tenant group, groups in first-seen order."""
        async with self.router.directory() as session:
            rows = await TenantAccessRepository(session).list_available(email)

        groups: dict[UUID, TenantGroupRead] = {}
        for access, tenant, group, member in rows:
            if group.id not in groups:
                groups[group.id] = TenantGroupRead(
                    tenant_group_id=group.id,
                    tenant_group_name=group.name,
                    tenant_group_code=group.code,
                    tenants=[],
                )
            groups[group.id].tenants.append(
                AvailableTenant(
                    tenant_id=tenant.id,
                    tenant_slug=tenant.slug,
                    tenant_name=tenant.name,
                    display_name=member.display_name or tenant.name,
                    display_order=member.display_order,
                    is_default=member.is_default,
                    access_level=access.access_level,
                    can_switch=access.can_switch,
                )
            )
        return list(groups.values())

    async def available_tenant_ids(self, email: str) -> list[UUID]:
        return await self.loader.available_tenant_ids(email)

    async def tenant_group_id(self, email: str, tenant_id: UUID) -> UUID | None:
        return await self.loader.tenant_group_id(email, tenant_id)

    async def default_tenant(self, email: str) -> AvailableTenant | None:
        """The member flagged default, else the first accessible tenant."""
        groups = await self.available_tenants(email)
        for group in groups:
            for tenant in group.tenants:
                if tenant.is_default:
                    return tenant
        if groups and groups[0].tenants:
            return groups[0].tenants[0]
        return None

    async def can_switch(self, email: str, target_tenant_id: UUID) -> bool:
        async with self.router.directory() as session:
            return await TenantAccessRepository(session).has_switch_grant(email, target_tenant_id)

    async def grant_access(
        self,
        email: str,
        tenant_id: UUID,
        tenant_group_id: UUID,
        access_level: AccessLevel | str = AccessLevel.USER,
        can_switch: bool = True,
        granted_by: UUID | None = None,
    ) -> UserTenantAccess:
        grant = UserTenantAccess(
            email=email,
            tenant_id=tenant_id,
            tenant_group_id=tenant_group_id,
            access_level=access_level.value if isinstance(access_level, AccessLevel) else access_level,
            can_switch=can_switch,
            granted_by=granted_by,
        )
        async with self.router.directory() as session:
            TenantAccessRepository(session).add(grant)
            await session.commit()

        await self.audit.log_success(
            tenant_id,
            AuditAction.ACCESS_GRANT,
            "user_tenant_access",
            entity_id=grant.id,
            user_id=granted_by,
            changes={"email": email, "tenant_group_id": str(tenant_group_id)},
        )
        return grant

    async def revoke_access(self, email: str, tenant_id: UUID) -> int:
        async with self.router.directory() as session:
            revoked = await TenantAccessRepository(session).revoke(email, tenant_id)
            await session.commit()

        if revoked:
            await self.audit.log_success(
                tenant_id,
                AuditAction.ACCESS_REVOKE,
                "user_tenant_access",
                changes={"email": email},
            )
        return revoked

    async def switch(self, email: str, from_tenant_id: UUID, to_tenant_id: UUID) -> LoginResponse:
        """Move an authenticated identity into another tenant of its group.

        Raises:
            ForbiddenError: No open access grant with can_switch for the target.
            NotFoundError: Target tenant is missing or inactive.
            InvalidCredentialsError: The identity has no live account in the target store.
        """
        allowed, target = await asyncio.gather(
            self.can_switch(email, to_tenant_id),
            self.directory.get_active(to_tenant_id),
        )
        if not allowed:
            logger.warning(
                "Tenant switch denied",
                from_tenant_id=str(from_tenant_id),
                to_tenant_id=str(to_tenant_id),
            )
            await self.audit.log_failure(
                from_tenant_id,
                AuditAction.TENANT_SWITCH,
                "tenant",
                error_message="No switch grant for target tenant",
                entity_id=to_tenant_id,
            )
            raise ForbiddenError()
        if target is None:
            raise NotFoundError("Tenant not found")

        ctx = get_audit_context()
        ip_address = ctx.ip_address if ctx else None
        user_agent = ctx.user_agent if ctx else None

        # Group membership is not enough: the account itself must exist there
        async with self.router.tenant(target) as session:
            repo = UserRepository(session)
            user = await repo.get_active_by_email(email)
            if user is None:
                raise InvalidCredentialsError("User account not found in target tenant")
            await repo.record_successful_login(user.id, ip_address)
            await session.commit()

        context, tenant_groups = await asyncio.gather(
            self.loader.load(target, user),
            self.available_tenants(email),
        )
        tokens = self.issuer.issue(user, target, context)

        # Written before the tokens are released; if this fails the switch fails
        async with self.router.directory() as session:
            TenantSwitchLogRepository(session).add(
                TenantSwitchLog(
                    email=email,
                    from_tenant_id=from_tenant_id,
                    to_tenant_id=to_tenant_id,
                    tenant_group_id=context.tenant_group_id,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )
            )
            await session.commit()

        await self.audit.log_success(
            target.id,
            AuditAction.TENANT_SWITCH,
            "tenant",
            entity_id=target.id,
            user_id=user.id,
            changes={
                "from_tenant_id": str(from_tenant_id),
                "to_tenant_id": str(to_tenant_id),
                "tenant_group_id": str(context.tenant_group_id) if context.tenant_group_id else None,
            },
        )
        logger.info(
            "Tenant switched",
            user_id=str(user.id),
            from_tenant_id=str(from_tenant_id),
            to_tenant_id=str(to_tenant_id),
        )
        return build_login_response(user, target, context, tokens, tenant_groups)
