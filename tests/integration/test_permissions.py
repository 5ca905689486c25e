"""Effective permissions: grant union filtered by the tenant's active modules."""

from datetime import timedelta

from sqlalchemy import update

from src.gatekeeper.models.base import utc_now
from src.gatekeeper.models.public import TenantModule
from src.gatekeeper.models.tenant import UserProfile
from src.gatekeeper.repositories.tenant import ProfileRepository
from src.gatekeeper.services import ModuleActivationGate, PermissionAggregator
from tests.factories import UserFactory
from tests.helpers import activate_module, create_permissions, create_profile, grant_direct


async def test_acme_scenario(connection_router, seed):
    """Direct REPORTS.view is dropped (module inactive), profile HR.approve survives."""
    aggregator = PermissionAggregator(connection_router)

    assert await aggregator.effective_permissions(seed.acme, seed.alice.id) == {"HR.approve"}


async def test_active_modules_ignores_disabled_expired_and_deleted(connection_router, seed):
    async with connection_router.directory() as session:
        await activate_module(session, seed.acme, "VEHICLES", expires_at=utc_now() - timedelta(days=1))
        await activate_module(session, seed.acme, "SUPPORT", deleted_at=utc_now())
        await activate_module(session, seed.acme, "CONTENT", expires_at=utc_now() + timedelta(days=30))
        await session.commit()

    active = await ModuleActivationGate(connection_router).active_modules(seed.acme.id)

    assert active == {"HR", "ADMIN", "CONTENT"}


async def test_activation_is_per_tenant(connection_router, seed):
    assert await ModuleActivationGate(connection_router).active_modules(seed.globex.id) == {"HR"}


async def test_no_active_modules_means_no_permissions(connection_router, seed):
    async with connection_router.directory() as session:
        await session.execute(
            update(TenantModule)
            .where(TenantModule.tenant_id == seed.acme.id)
            .values(is_enabled=False)
        )
        await session.commit()

    aggregator = PermissionAggregator(connection_router)

    assert await aggregator.effective_permissions(seed.acme, seed.alice.id) == set()


async def test_enabling_module_exposes_existing_grants(connection_router, seed):
    async with connection_router.directory() as session:
        await session.execute(
            update(TenantModule)
            .where(TenantModule.tenant_id == seed.acme.id)
            .values(is_enabled=True)
        )
        await session.commit()

    aggregator = PermissionAggregator(connection_router)

    assert await aggregator.effective_permissions(seed.acme, seed.alice.id) == {
        "HR.approve",
        "REPORTS.view",
    }


async def test_grant_through_two_paths_counted_once(connection_router, seed):
    async with connection_router.tenant(seed.acme) as session:
        bob = UserFactory.build()
        session.add(bob)
        await session.flush()
        perms = await create_permissions(session, "HR.view")
        await grant_direct(session, bob, perms["HR.view"])
        await create_profile(session, perms["HR.view"], members=(bob,))
        await session.commit()

    rows = await PermissionAggregator(connection_router).effective_permission_rows(seed.acme, bob.id)

    assert [p.code for p in rows] == ["HR.view"]


async def test_deleted_profile_grants_nothing(connection_router, seed):
    async with connection_router.tenant(seed.acme) as session:
        await session.execute(update(UserProfile).values(deleted_at=utc_now()))
        await session.commit()

    aggregator = PermissionAggregator(connection_router)

    assert await aggregator.effective_permissions(seed.acme, seed.alice.id) == set()


async def test_user_without_grants_has_no_permissions(connection_router, seed):
    async with connection_router.tenant(seed.acme) as session:
        carol = UserFactory.build()
        session.add(carol)
        await session.commit()

    assert await PermissionAggregator(connection_router).effective_permissions(seed.acme, carol.id) == set()


async def test_modules_with_permissions_groups_and_decorates(connection_router, seed):
    async with connection_router.tenant(seed.acme) as session:
        perms = await create_permissions(session, "ADMIN.manage_users")
        await grant_direct(session, seed.alice, perms["ADMIN.manage_users"])
        await session.commit()

    modules = await PermissionAggregator(connection_router).modules_with_permissions(
        seed.acme, seed.alice.id
    )

    assert [m.code for m in modules] == ["ADMIN", "HR"]
    admin, hr = modules
    assert admin.name == "Administration"
    assert admin.icon == "settings"
    assert [p.code for p in admin.permissions] == ["ADMIN.manage_users"]
    assert [p.code for p in hr.permissions] == ["HR.approve"]


async def test_set_default_profile_is_exclusive(connection_router, seed):
    async with connection_router.tenant(seed.acme) as session:
        first = await create_profile(session, name="Basic", is_default=True)
        second = await create_profile(session, name="Standard")
        await session.commit()

    async with connection_router.tenant(seed.acme) as session:
        repo = ProfileRepository(session)
        assert (await repo.get_default()).id == first.id
        assert await repo.set_default(second.id) is True
        await session.commit()

    async with connection_router.tenant(seed.acme) as session:
        default = await ProfileRepository(session).get_default()

    assert default.id == second.id
