"""Password login: tenant resolution, failure indistinguishability, bookkeeping."""

import pyotp
import pytest
from sqlalchemy import update

from src.gatekeeper.core.audit_context import reset_audit_context, set_audit_context
from src.gatekeeper.core.exceptions import InvalidCredentialsError
from src.gatekeeper.core.security import decode_access_token, decode_refresh_token
from src.gatekeeper.models.public import AuditAction, Tenant
from src.gatekeeper.repositories.public import AuditLogRepository
from src.gatekeeper.schemas.auth import LoginResponse, TwoFactorRequired
from tests.factories import DEFAULT_TEST_PASSWORD, UserFactory
from tests.helpers import reload_user
from tests.integration.seed import ALICE_EMAIL


async def test_login_resolves_tenant_from_email_domain(auth_service, seed):
    response = await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD)

    assert isinstance(response, LoginResponse)
    assert response.tenant.slug == "acme"
    assert response.user.id == seed.alice.id
    assert response.token_type == "bearer"


async def test_login_response_carries_session_context(auth_service, seed):
    response = await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD, "acme")

    assert [c.name for c in response.companies] == ["Acme Manufacturing"]
    assert response.companies[0].is_primary is True
    assert [g.tenant_group_code for g in response.tenant_groups] == ["acme-holding"]
    assert [t.tenant_slug for t in response.tenant_groups[0].tenants] == ["acme", "globex"]

    claims = decode_access_token(response.access_token)
    assert claims["sub"] == str(seed.alice.id)
    assert claims["tenant_id"] == str(seed.acme.id)
    assert claims["tenant_slug"] == "acme"
    assert claims["permissions"] == ["HR.approve"]
    assert claims["tenant_group_id"] == str(seed.group.id)
    assert claims["available_tenants"] == [str(seed.acme.id), str(seed.globex.id)]
    assert claims["primary_company"] == str(response.companies[0].id)


async def test_refresh_token_carries_no_permissions(auth_service, seed):
    response = await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD)

    payload = decode_refresh_token(response.refresh_token)
    assert payload["sub"] == str(seed.alice.id)
    assert payload["tenant_id"] == str(seed.acme.id)
    assert "permissions" not in payload


async def test_login_by_full_name_with_explicit_tenant(auth_service, seed):
    response = await auth_service.login("Alice Anders", DEFAULT_TEST_PASSWORD, "acme")

    assert response.user.id == seed.alice.id


@pytest.mark.parametrize("identifier", ["Alice@acme.com", "ALICE@ACME.COM", " alice@Acme.com "])
@pytest.mark.parametrize("slug", [None, "acme"])
async def test_email_match_ignores_case(auth_service, seed, identifier, slug):
    response = await auth_service.login(identifier, DEFAULT_TEST_PASSWORD, slug)

    assert response.tenant.slug == "acme"
    assert response.user.id == seed.alice.id
    assert [g.tenant_group_code for g in response.tenant_groups] == ["acme-holding"]


async def test_explicit_slug_wins_over_email_domain(auth_service, seed):
    response = await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD, "globex")

    assert response.tenant.slug == "globex"
    assert response.user.id == seed.alice_globex.id


async def test_failures_are_indistinguishable(auth_service, connection_router, seed):
    async with connection_router.tenant(seed.acme) as session:
        session.add(UserFactory.deleted(email="gone@acme.com"))
        session.add(UserFactory.locked(email="locked@acme.com"))
        await session.commit()

    attempts = [
        (ALICE_EMAIL, DEFAULT_TEST_PASSWORD, "no-such-tenant"),
        ("nobody@unknown-domain.org", DEFAULT_TEST_PASSWORD, None),
        ("nobody@acme.com", DEFAULT_TEST_PASSWORD, None),
        (ALICE_EMAIL, "wrong-password", None),
        ("gone@acme.com", DEFAULT_TEST_PASSWORD, None),
        ("locked@acme.com", DEFAULT_TEST_PASSWORD, None),
        ("Alice Anders", DEFAULT_TEST_PASSWORD, None),
    ]
    details = set()
    for identifier, password, slug in attempts:
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.login(identifier, password, slug)
        details.add((exc_info.value.status_code, exc_info.value.detail))

    assert details == {(401, "Invalid credentials")}


async def test_inactive_tenant_rejected(auth_service, connection_router, seed):
    async with connection_router.directory() as session:
        await session.execute(update(Tenant).where(Tenant.id == seed.acme.id).values(is_active=False))
        await session.commit()

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD)


async def test_failed_attempts_counted_but_never_lock(auth_service, connection_router, seed):
    """Three wrong passwords then the right one still succeeds."""
    for _ in range(3):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(ALICE_EMAIL, "wrong-password")

    async with connection_router.tenant(seed.acme) as session:
        user = await reload_user(session, seed.alice)
    assert user.failed_login_attempts == 3
    assert user.locked_until is None

    response = await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD)
    assert isinstance(response, LoginResponse)

    async with connection_router.tenant(seed.acme) as session:
        user = await reload_user(session, seed.alice)
    assert user.failed_login_attempts == 0
    assert user.last_login_at is not None


async def test_successful_login_records_client_ip(auth_service, connection_router, seed):
    token = set_audit_context(ip_address="203.0.113.7", user_agent="pytest")
    try:
        await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD)
    finally:
        reset_audit_context(token)

    async with connection_router.tenant(seed.acme) as session:
        user = await reload_user(session, seed.alice)
    assert user.last_login_ip == "203.0.113.7"


async def test_locked_account_rejected_even_with_right_password(
    auth_service, connection_router, seed
):
    async with connection_router.tenant(seed.acme) as session:
        locked = UserFactory.locked(email="locked@acme.com")
        session.add(locked)
        await session.commit()

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("locked@acme.com", DEFAULT_TEST_PASSWORD)

    async with connection_router.tenant(seed.acme) as session:
        assert (await reload_user(session, locked)).last_login_at is None


async def test_login_is_audited(auth_service, connection_router, seed):
    await auth_service.login(ALICE_EMAIL, DEFAULT_TEST_PASSWORD)
    with pytest.raises(InvalidCredentialsError):
        await auth_service.login(ALICE_EMAIL, "wrong-password")

    async with connection_router.directory() as session:
        entries = await AuditLogRepository(session).history(
            seed.acme.id, actions=[AuditAction.USER_LOGIN, AuditAction.USER_LOGIN_FAILED]
        )

    assert [(e.action, e.status) for e in entries] == [
        ("user.login", "success"),
        ("user.login_failed", "failure"),
    ]
    assert entries[0].user_id == seed.alice.id


async def test_two_factor_account_gets_challenge_not_tokens(auth_service, connection_router, seed):
    secret = pyotp.random_base32()
    async with connection_router.tenant(seed.acme) as session:
        user = UserFactory.with_two_factor(secret, email="bob@acme.com")
        session.add(user)
        await session.commit()

    response = await auth_service.login("bob@acme.com", DEFAULT_TEST_PASSWORD)

    assert isinstance(response, TwoFactorRequired)
    assert response.requires_two_factor is True
    assert response.user_id == user.id
    assert response.tenant_slug == "acme"
    assert not hasattr(response, "access_token")


async def test_two_factor_account_wrong_password_is_plain_failure(
    auth_service, connection_router, seed
):
    async with connection_router.tenant(seed.acme) as session:
        session.add(UserFactory.with_two_factor(pyotp.random_base32(), email="bob@acme.com"))
        await session.commit()

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("bob@acme.com", "wrong-password")
