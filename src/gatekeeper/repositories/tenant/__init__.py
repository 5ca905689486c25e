"""Tenant-store repositories.

Sessions passed in here must come from ConnectionRouter.tenant(), which
scopes them to one tenant's schema.
"""

from src.gatekeeper.repositories.tenant.company import CompanyRepository
from src.gatekeeper.repositories.tenant.permission import PermissionRepository, ProfileRepository
from src.gatekeeper.repositories.tenant.user import UserRepository

__all__ = [
    "CompanyRepository",
    "PermissionRepository",
    "ProfileRepository",
    "UserRepository",
]
