"""Model exports.

Import from here: `from src.gatekeeper.models import User, Tenant`
"""

# Enums
from src.gatekeeper.models.enums import AccessLevel, TwoFactorMethod

# Public schema models
from src.gatekeeper.models.public import (
    AuditAction,
    AuditLog,
    AuditStatus,
    Module,
    Tenant,
    TenantGroup,
    TenantGroupMember,
    TenantModule,
    TenantSwitchLog,
    UserTenantAccess,
)

# Tenant schema models
from src.gatekeeper.models.tenant import (
    Company,
    Permission,
    User,
    UserCompany,
    UserPermission,
    UserProfile,
    UserProfilePermission,
    UserUserProfile,
)

__all__ = [
    # Enums
    "AccessLevel",
    "AuditAction",
    "AuditStatus",
    "TwoFactorMethod",
    # Public schema models
    "AuditLog",
    "Module",
    "Tenant",
    "TenantGroup",
    "TenantGroupMember",
    "TenantModule",
    "TenantSwitchLog",
    "UserTenantAccess",
    # Tenant schema models
    "Company",
    "Permission",
    "User",
    "UserCompany",
    "UserPermission",
    "UserProfile",
    "UserProfilePermission",
    "UserUserProfile",
]

DIRECTORY_TABLES = [
    Tenant.__table__,
    Module.__table__,
    TenantModule.__table__,
    TenantGroup.__table__,
    TenantGroupMember.__table__,
    UserTenantAccess.__table__,
    TenantSwitchLog.__table__,
    AuditLog.__table__,
]

TENANT_TABLES = [
    User.__table__,
    Permission.__table__,
    UserProfile.__table__,
    UserProfilePermission.__table__,
    UserUserProfile.__table__,
    UserPermission.__table__,
    Company.__table__,
    UserCompany.__table__,
]
