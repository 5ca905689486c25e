"""Repository layer - data access abstraction."""

from src.gatekeeper.repositories.base import BaseRepository
from src.gatekeeper.repositories.public import (
    AuditLogRepository,
    ModuleActivationRepository,
    TenantAccessRepository,
    TenantRepository,
    TenantSwitchLogRepository,
)
from src.gatekeeper.repositories.tenant import (
    CompanyRepository,
    PermissionRepository,
    ProfileRepository,
    UserRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Public schema
    "AuditLogRepository",
    "ModuleActivationRepository",
    "TenantAccessRepository",
    "TenantRepository",
    "TenantSwitchLogRepository",
    # Tenant schema
    "CompanyRepository",
    "PermissionRepository",
    "ProfileRepository",
    "UserRepository",
]
