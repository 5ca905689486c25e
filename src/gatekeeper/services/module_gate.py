"""Which feature modules a tenant currently has."""

from uuid import UUID

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.repositories.public import ModuleActivationRepository


class ModuleActivationGate:
    def __init__(self, router: ConnectionRouter):
        self.router = router

    async def active_modules(self, tenant_id: UUID) -> set[str]:
        """Codes of enabled, non-deleted, non-expired modules. May be empty."""
        async with self.router.directory() as session:
            return await ModuleActivationRepository(session).list_active_codes(tenant_id)
