"""Tenant store models.

These tables carry no schema; each tenant's copy is selected by search_path.
"""

from src.gatekeeper.models.tenant.company import Company, UserCompany
from src.gatekeeper.models.tenant.permission import (
    Permission,
    UserPermission,
    UserProfile,
    UserProfilePermission,
    UserUserProfile,
)
from src.gatekeeper.models.tenant.user import User

__all__ = [
    "Company",
    "Permission",
    "User",
    "UserCompany",
    "UserPermission",
    "UserProfile",
    "UserProfilePermission",
    "UserUserProfile",
]
