"""Directory factories: tenants, modules, tenant groups and access grants."""

from datetime import timedelta

from polyfactory import Use

from src.gatekeeper.models.enums import AccessLevel
from src.gatekeeper.models.public import (
    Module,
    Tenant,
    TenantGroup,
    TenantGroupMember,
    TenantModule,
    UserTenantAccess,
)
from tests.factories.base import BaseFactory, generate_uuid, short_id, utc_now


class TenantFactory(BaseFactory):
    """Factory for generating Tenant test data."""

    __model__ = Tenant

    id = Use(generate_uuid)
    name = Use(lambda: f"Test Tenant {short_id()}")
    slug = Use(lambda: f"test_{short_id()}")
    custom_domain = None
    is_active = True
    created_at = Use(utc_now)
    deleted_at = None

    @classmethod
    def inactive(cls, **kwargs):
        return cls.build(is_active=False, **kwargs)

    @classmethod
    def deleted(cls, **kwargs):
        """Create a soft-deleted tenant."""
        return cls.build(deleted_at=utc_now(), **kwargs)


class ModuleFactory(BaseFactory):
    __model__ = Module

    id = Use(generate_uuid)
    code = Use(lambda: f"MOD{short_id().upper()}")
    name = "Test Module"


class TenantModuleFactory(BaseFactory):
    """Factory for module activations. tenant_id and module_id must be set."""

    __model__ = TenantModule

    id = Use(generate_uuid)
    tenant_id = None
    module_id = None
    is_enabled = True
    expires_at = None
    created_at = Use(utc_now)
    deleted_at = None

    @classmethod
    def disabled(cls, **kwargs):
        return cls.build(is_enabled=False, **kwargs)

    @classmethod
    def expired(cls, **kwargs):
        return cls.build(expires_at=utc_now() - timedelta(days=1), **kwargs)


class TenantGroupFactory(BaseFactory):
    __model__ = TenantGroup

    id = Use(generate_uuid)
    name = Use(lambda: f"Group {short_id()}")
    code = Use(lambda: f"grp_{short_id()}")
    is_active = True
    created_at = Use(utc_now)


class TenantGroupMemberFactory(BaseFactory):
    __model__ = TenantGroupMember

    id = Use(generate_uuid)
    tenant_group_id = None
    tenant_id = None
    display_name = None
    display_order = 0
    is_default = False
    is_active = True


class UserTenantAccessFactory(BaseFactory):
    """Factory for access grants. email, tenant_id and tenant_group_id must be set."""

    __model__ = UserTenantAccess

    id = Use(generate_uuid)
    email = None
    tenant_id = None
    tenant_group_id = None
    can_access = True
    can_switch = True
    access_level = AccessLevel.USER.value
    granted_by = None
    granted_at = Use(utc_now)
    revoked_at = None

    @classmethod
    def view_only(cls, **kwargs):
        """Grant that lists the tenant but does not allow switching into it."""
        return cls.build(can_switch=False, **kwargs)
