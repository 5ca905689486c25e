"""Directory models - public schema.

Tenant registry, module activation, cross-tenant access grants and the
audit trail. Per-tenant principal data lives in models/tenant/.
"""

from src.gatekeeper.models.public.audit import AuditAction, AuditLog, AuditStatus
from src.gatekeeper.models.public.tenant import Module, Tenant, TenantModule
from src.gatekeeper.models.public.tenant_group import (
    TenantGroup,
    TenantGroupMember,
    TenantSwitchLog,
    UserTenantAccess,
)

__all__ = [
    # Enums
    "AuditAction",
    "AuditStatus",
    # Models
    "AuditLog",
    "Module",
    "Tenant",
    "TenantGroup",
    "TenantGroupMember",
    "TenantModule",
    "TenantSwitchLog",
    "UserTenantAccess",
]
