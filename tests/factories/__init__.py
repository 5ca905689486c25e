"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, TenantFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.permission import CompanyFactory, PermissionFactory, UserProfileFactory
from tests.factories.tenant import (
    ModuleFactory,
    TenantFactory,
    TenantGroupFactory,
    TenantGroupMemberFactory,
    TenantModuleFactory,
    UserTenantAccessFactory,
)
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Directory
    "ModuleFactory",
    "TenantFactory",
    "TenantGroupFactory",
    "TenantGroupMemberFactory",
    "TenantModuleFactory",
    "UserTenantAccessFactory",
    # Tenant store
    "CompanyFactory",
    "PermissionFactory",
    "UserFactory",
    "UserProfileFactory",
    "DEFAULT_TEST_PASSWORD",
]
