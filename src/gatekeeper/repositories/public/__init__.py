"""Directory repositories (public schema).

Tenant-store repositories go in repositories/tenant/.
"""

from src.gatekeeper.repositories.public.audit import AuditLogRepository
from src.gatekeeper.repositories.public.tenant import ModuleActivationRepository, TenantRepository
from src.gatekeeper.repositories.public.tenant_access import (
    TenantAccessRepository,
    TenantSwitchLogRepository,
)

__all__ = [
    "AuditLogRepository",
    "ModuleActivationRepository",
    "TenantAccessRepository",
    "TenantRepository",
    "TenantSwitchLogRepository",
]
