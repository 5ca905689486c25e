"""Test helper functions for common data creation patterns.

Directory helpers take a directory session, tenant-store helpers take a
session of that tenant's store. Callers commit.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.gatekeeper.models.public import (
    Module,
    Tenant,
    TenantGroup,
    TenantGroupMember,
    TenantModule,
    UserTenantAccess,
)
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
from tests.factories import (
    CompanyFactory,
    ModuleFactory,
    PermissionFactory,
    TenantGroupFactory,
    TenantGroupMemberFactory,
    TenantModuleFactory,
    UserProfileFactory,
    UserTenantAccessFactory,
)

_TOKEN_IN_LINK = re.compile(r"token=([A-Za-z0-9_\-]+)")


# --- Directory ---


async def activate_module(
    session: AsyncSession, tenant: Tenant, code: str, **activation_kwargs
) -> TenantModule:
    """Activate a module for a tenant, creating the catalogue entry if needed."""
    result = await session.execute(select(Module).where(Module.code == code))
    module = result.scalar_one_or_none()
    if module is None:
        module = ModuleFactory.build(code=code, name=code.title())
        session.add(module)
        await session.flush()

    activation = TenantModuleFactory.build(
        tenant_id=tenant.id, module_id=module.id, **activation_kwargs
    )
    session.add(activation)
    await session.flush()
    return activation


async def create_tenant_group(
    session: AsyncSession,
    members: list[Tenant],
    default: Tenant | None = None,
    **group_kwargs,
) -> TenantGroup:
    """Create a group whose display order follows the order of `members`."""
    group = TenantGroupFactory.build(**group_kwargs)
    session.add(group)
    await session.flush()

    for order, tenant in enumerate(members):
        session.add(
            TenantGroupMemberFactory.build(
                tenant_group_id=group.id,
                tenant_id=tenant.id,
                display_order=order,
                is_default=default is not None and tenant.id == default.id,
            )
        )
    await session.flush()
    return group


async def grant_tenant_access(
    session: AsyncSession,
    email: str,
    tenant: Tenant,
    group: TenantGroup,
    **grant_kwargs,
) -> UserTenantAccess:
    grant = UserTenantAccessFactory.build(
        email=email, tenant_id=tenant.id, tenant_group_id=group.id, **grant_kwargs
    )
    session.add(grant)
    await session.flush()
    return grant


async def get_member(session: AsyncSession, group: TenantGroup, tenant: Tenant) -> TenantGroupMember:
    result = await session.execute(
        select(TenantGroupMember).where(
            TenantGroupMember.tenant_group_id == group.id,
            TenantGroupMember.tenant_id == tenant.id,
        )
    )
    return result.scalar_one()


# --- Tenant store ---


async def create_permissions(session: AsyncSession, *codes: str) -> dict[str, Permission]:
    """Create permissions from "MODULE.action" codes, keyed by code."""
    permissions = {code: PermissionFactory.for_code(code) for code in codes}
    session.add_all(permissions.values())
    await session.flush()
    return permissions


async def grant_direct(session: AsyncSession, user: User, *permissions: Permission) -> None:
    session.add_all(UserPermission(user_id=user.id, permission_id=p.id) for p in permissions)
    await session.flush()


async def create_profile(
    session: AsyncSession,
    *permissions: Permission,
    members: tuple[User, ...] = (),
    **profile_kwargs,
) -> UserProfile:
    """Create a profile carrying `permissions` and assign it to `members`."""
    profile = UserProfileFactory.build(**profile_kwargs)
    session.add(profile)
    await session.flush()

    session.add_all(
        UserProfilePermission(profile_id=profile.id, permission_id=p.id) for p in permissions
    )
    session.add_all(UserUserProfile(user_id=user.id, profile_id=profile.id) for user in members)
    await session.flush()
    return profile


async def assign_company(
    session: AsyncSession, user: User, is_primary: bool = False, **company_kwargs
) -> Company:
    company = CompanyFactory.build(**company_kwargs)
    session.add(company)
    await session.flush()

    session.add(UserCompany(user_id=user.id, company_id=company.id, is_primary=is_primary))
    await session.flush()
    return company


async def reload_user(session: AsyncSession, user: User) -> User:
    result = await session.execute(
        select(User).where(User.id == user.id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


def extract_link_token(html_body: str) -> str:
    """Pull the single-use token out of a verification or reset email."""
    match = _TOKEN_IN_LINK.search(html_body)
    assert match is not None, "no token link in email body"
    return match.group(1)
