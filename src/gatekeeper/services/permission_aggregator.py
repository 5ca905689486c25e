"""Effective permission computation.

A principal's permissions are the union of its direct grants and the grants of
every profile it belongs to, restricted to permissions whose category is a
module currently active for the tenant. Nothing is materialized per user:
disabling a module removes its permissions from every principal at once.
"""

import asyncio
from itertools import groupby
from uuid import UUID

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.modules import module_icon, module_name
from src.gatekeeper.models.public import Tenant
from src.gatekeeper.models.tenant import Permission
from src.gatekeeper.repositories.tenant import PermissionRepository
from src.gatekeeper.schemas.permissions import ModulePermissions, PermissionRead
from src.gatekeeper.services.module_gate import ModuleActivationGate


class PermissionAggregator:
    def __init__(self, router: ConnectionRouter, gate: ModuleActivationGate | None = None):
        self.router = router
        self.gate = gate or ModuleActivationGate(router)

    async def _granted(self, tenant: Tenant, user_id: UUID) -> list[Permission]:
        async with self.router.tenant(tenant) as session:
            return await PermissionRepository(session).list_granted(user_id)

    async def effective_permission_rows(self, tenant: Tenant, user_id: UUID) -> list[Permission]:
        """Granted permissions filtered to the tenant's active modules."""
        active, granted = await asyncio.gather(
            self.gate.active_modules(tenant.id),
            self._granted(tenant, user_id),
        )
        if not active:
            return []
        return [permission for permission in granted if permission.category in active]

    async def effective_permissions(self, tenant: Tenant, user_id: UUID) -> set[str]:
        rows = await self.effective_permission_rows(tenant, user_id)
        return {permission.code for permission in rows}

    async def modules_with_permissions(
        self, tenant: Tenant, user_id: UUID
    ) -> list[ModulePermissions]:
        """Effective permissions grouped by module, with display name and icon."""
        rows = await self.effective_permission_rows(tenant, user_id)
        rows.sort(key=lambda p: (p.category, p.code))
        return [
            ModulePermissions(
                code=category,
                name=module_name(category),
                icon=module_icon(category),
                permissions=[PermissionRead.model_validate(p) for p in permissions],
            )
            for category, permissions in groupby(rows, key=lambda p: p.category)
        ]
