"""TOTP second factor: provisioning, confirmation, login check, disabling.

Per principal: DISABLED -> SECRET_PROVISIONED (secret stored, flag off)
-> ENABLED, and ENABLED -> DISABLED on an explicit, password-proven disable.
"""

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.exceptions import (
    InvalidCredentialsError,
    InvalidTwoFactorCodeError,
    TwoFactorNotConfiguredError,
)
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.core.security import (
    generate_totp_secret,
    provisioning_uri,
    render_qr_data_uri,
    verify_password,
    verify_totp_code,
)
from src.gatekeeper.models.enums import TwoFactorMethod
from src.gatekeeper.models.public import AuditAction, Tenant
from src.gatekeeper.models.tenant import User
from src.gatekeeper.repositories.tenant import UserRepository
from src.gatekeeper.schemas.auth import TwoFactorSetupResponse, TwoFactorStatus
from src.gatekeeper.services.audit_service import AuditService
from src.gatekeeper.services.tenant_directory import TenantDirectory

logger = get_logger(__name__)


class TwoFactorService:
    def __init__(self, router: ConnectionRouter, directory: TenantDirectory, audit: AuditService):
        self.router = router
        self.directory = directory
        self.audit = audit

    async def begin_setup(self, tenant: Tenant, user: User) -> TwoFactorSetupResponse:
        """Store a fresh secret (flag off) and return it with its provisioning URI.

        Any earlier unconfirmed secret is overwritten.
        """
        secret = generate_totp_secret()
        async with self.router.tenant(tenant) as session:
            await UserRepository(session).update_fields(
                user.id, two_factor_secret=secret, two_factor_enabled=False
            )
            await session.commit()

        uri = provisioning_uri(secret, user.email)
        logger.info("2FA setup started", user_id=str(user.id))
        return TwoFactorSetupResponse(secret=secret, qr_payload=uri, qr_code=render_qr_data_uri(uri))

    async def confirm_enable(self, tenant: Tenant, user: User, code: str) -> None:
        """Turn 2FA on once the user proves their authenticator produces valid codes."""
        async with self.router.tenant(tenant) as session:
            repo = UserRepository(session)
            current = await repo.get_active_by_id(user.id)
            if current is None:
                raise InvalidCredentialsError()
            if not current.two_factor_secret:
                raise TwoFactorNotConfiguredError("2FA is not configured. Start the setup first")
            if not verify_totp_code(current.two_factor_secret, code):
                raise InvalidTwoFactorCodeError()

            await repo.update_fields(user.id, two_factor_enabled=True)
            await session.commit()

        await self.audit.log_success(
            tenant.id, AuditAction.TWO_FACTOR_ENABLE, "user", entity_id=user.id, user_id=user.id
        )

    async def verify_during_login(
        self, email: str, tenant_slug: str, code: str
    ) -> tuple[Tenant, User]:
        """Second step of a 2FA login.

        Tenant and principal are looked up again from scratch. Never succeeds
        for an account that does not have 2FA enabled.
        """
        tenant = await self.directory.resolve(tenant_slug, email)
        if tenant is None:
            raise InvalidCredentialsError()

        async with self.router.tenant(tenant) as session:
            user = await UserRepository(session).get_active_by_email(email)
        if user is None:
            raise InvalidCredentialsError()

        if not user.two_factor_enabled or not user.two_factor_secret:
            raise TwoFactorNotConfiguredError("2FA is not enabled for this account")

        if user.is_locked():
            logger.info("2FA login rejected for locked account", user_id=str(user.id))
            raise InvalidCredentialsError()

        if not verify_totp_code(user.two_factor_secret, code):
            logger.warning("Invalid 2FA code during login", user_id=str(user.id))
            async with self.router.tenant(tenant) as session:
                await UserRepository(session).record_failed_login(user.id)
                await session.commit()
            await self.audit.log_failure(
                tenant.id,
                AuditAction.USER_LOGIN_FAILED,
                "user",
                error_message="Invalid 2FA code",
                entity_id=user.id,
                user_id=user.id,
            )
            raise InvalidTwoFactorCodeError()

        return tenant, user

    async def disable(self, tenant: Tenant, user: User, password: str) -> None:
        """Clear the secret and flag; requires the current password."""
        async with self.router.tenant(tenant) as session:
            repo = UserRepository(session)
            current = await repo.get_active_by_id(user.id)
            if current is None or not verify_password(password, current.password_hash):
                raise InvalidCredentialsError("Incorrect password")

            await repo.update_fields(user.id, two_factor_secret=None, two_factor_enabled=False)
            await session.commit()

        await self.audit.log_success(
            tenant.id, AuditAction.TWO_FACTOR_DISABLE, "user", entity_id=user.id, user_id=user.id
        )

    def status(self, user: User) -> TwoFactorStatus:
        if user.two_factor_enabled:
            return TwoFactorStatus(enabled=True, method=TwoFactorMethod.AUTHENTICATOR.value)
        return TwoFactorStatus(enabled=False)
