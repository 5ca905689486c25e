"""Account lifecycle: email verification, password reset and change, deactivation.

Verification and reset tokens are random, single use, and stored only as
SHA-256 hashes. Redemption is a single conditional UPDATE, so a token can be
consumed once even under concurrent requests.
"""

from datetime import timedelta
from urllib.parse import urlencode

from src.gatekeeper.core.config import get_settings
from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.exceptions import (
    EmailAlreadyVerifiedError,
    InvalidCredentialsError,
    InvalidFlowTokenError,
    NotFoundError,
    PasswordReuseError,
)
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.core.notifications import (
    NotificationSender,
    dispatch_notification,
    password_reset_email_html,
    verification_email_html,
)
from src.gatekeeper.core.security import (
    generate_flow_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.gatekeeper.models.base import utc_now
from src.gatekeeper.models.public import AuditAction, Tenant
from src.gatekeeper.models.tenant import User
from src.gatekeeper.repositories.tenant import UserRepository
from src.gatekeeper.schemas.auth import MessageResponse
from src.gatekeeper.services.audit_service import AuditService
from src.gatekeeper.services.tenant_directory import TenantDirectory

logger = get_logger(__name__)

VERIFICATION_SENT_MESSAGE = "If the account exists, a verification email has been sent"
RESET_REQUESTED_MESSAGE = "If the email exists, you will receive a link to reset your password"


def _frontend_link(path: str, token: str, email: str, tenant: Tenant) -> str:
    settings = get_settings()
    query = urlencode({"token": token, "email": email, "tenant": tenant.slug})
    return f"{settings.app_url}/{settings.default_locale}/{path}?{query}"


class AccountService:
    def __init__(
        self,
        router: ConnectionRouter,
        directory: TenantDirectory,
        notifier: NotificationSender,
        audit: AuditService,
    ):
        self.router = router
        self.directory = directory
        self.notifier = notifier
        self.audit = audit

    async def _find(self, email: str, tenant_slug: str | None) -> tuple[Tenant | None, User | None]:
        tenant = await self.directory.resolve(tenant_slug, email)
        if tenant is None:
            return None, None
        async with self.router.tenant(tenant) as session:
            user = await UserRepository(session).get_active_by_email(email)
        return tenant, user

    async def send_verification_email(self, email: str, tenant_slug: str | None) -> MessageResponse:
        """Issue a new verification token and mail the link.

        Unknown accounts get the same answer as known ones.
        """
        tenant, user = await self._find(email, tenant_slug)
        if tenant is None or user is None:
            return MessageResponse(message=VERIFICATION_SENT_MESSAGE)
        if user.is_verified:
            raise EmailAlreadyVerifiedError()

        token = generate_flow_token()
        async with self.router.tenant(tenant) as session:
            await UserRepository(session).update_fields(
                user.id, verification_token_hash=hash_token(token)
            )
            await session.commit()

        link = _frontend_link("verify-email", token, user.email, tenant)
        dispatch_notification(
            self.notifier,
            user.email,
            tenant.id,
            "Verify your email address",
            verification_email_html(user.full_name, link),
        )
        logger.info("Verification email queued", user_id=str(user.id))
        return MessageResponse(message=VERIFICATION_SENT_MESSAGE)

    async def verify_email(self, token: str, email: str, tenant_slug: str | None) -> MessageResponse:
        tenant, user = await self._find(email, tenant_slug)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        if user is None:
            raise NotFoundError("User not found")
        if user.is_verified:
            return MessageResponse(message="Email was already verified")
        if not user.verification_token_hash:
            raise InvalidFlowTokenError()

        async with self.router.tenant(tenant) as session:
            redeemed = await UserRepository(session).redeem_verification_token(
                user.id, hash_token(token)
            )
            await session.commit()
        if not redeemed:
            raise InvalidFlowTokenError()

        await self.audit.log_success(
            tenant.id, AuditAction.USER_EMAIL_VERIFY, "user", entity_id=user.id, user_id=user.id
        )
        logger.info("Email verified", user_id=str(user.id))
        return MessageResponse(message="Email verified successfully")

    async def forgot_password(self, email: str, tenant_slug: str | None) -> MessageResponse:
        """Start a password reset. The answer never reveals whether the account exists."""
        tenant, user = await self._find(email, tenant_slug)
        if tenant is None or user is None:
            return MessageResponse(message=RESET_REQUESTED_MESSAGE)

        settings = get_settings()
        token = generate_flow_token()
        async with self.router.tenant(tenant) as session:
            await UserRepository(session).update_fields(
                user.id,
                password_reset_token_hash=hash_token(token),
                password_reset_expires_at=utc_now()
                + timedelta(minutes=settings.password_reset_expire_minutes),
            )
            await session.commit()

        link = _frontend_link("forgot-password", token, user.email, tenant)
        html_body = password_reset_email_html(
            user.full_name, link, settings.password_reset_expire_minutes
        )
        dispatch_notification(self.notifier, user.email, tenant.id, "Password Reset", html_body)

        await self.audit.log_success(
            tenant.id, AuditAction.PASSWORD_RESET_REQUEST, "user", entity_id=user.id, user_id=user.id
        )
        return MessageResponse(message=RESET_REQUESTED_MESSAGE)

    async def reset_password(
        self, token: str, email: str, tenant_slug: str | None, new_password: str
    ) -> MessageResponse:
        """Redeem a reset token. Every failure mode yields the same InvalidFlowTokenError."""
        tenant, user = await self._find(email, tenant_slug)
        if tenant is None or user is None or not user.password_reset_token_hash:
            raise InvalidFlowTokenError()

        async with self.router.tenant(tenant) as session:
            redeemed = await UserRepository(session).redeem_password_reset_token(
                user.id, hash_token(token), hash_password(new_password)
            )
            await session.commit()
        if not redeemed:
            raise InvalidFlowTokenError()

        await self.audit.log_success(
            tenant.id, AuditAction.PASSWORD_RESET, "user", entity_id=user.id, user_id=user.id
        )
        logger.info("Password reset completed", user_id=str(user.id))
        return MessageResponse(message="Password reset successfully")

    async def change_password(
        self, tenant: Tenant, user: User, current_password: str, new_password: str
    ) -> MessageResponse:
        async with self.router.tenant(tenant) as session:
            repo = UserRepository(session)
            current = await repo.get_active_by_id(user.id)
            if current is None or not verify_password(current_password, current.password_hash):
                raise InvalidCredentialsError("Incorrect current password")
            if verify_password(new_password, current.password_hash):
                raise PasswordReuseError()

            await repo.update_fields(
                user.id,
                password_hash=hash_password(new_password),
                password_changed_at=utc_now(),
            )
            await session.commit()

        await self.audit.log_success(
            tenant.id, AuditAction.PASSWORD_CHANGE, "user", entity_id=user.id, user_id=user.id
        )
        return MessageResponse(message="Password changed successfully")

    async def deactivate(self, tenant: Tenant, user: User) -> MessageResponse:
        """Soft delete. Existing tokens stop working at their next verification."""
        async with self.router.tenant(tenant) as session:
            await UserRepository(session).update_fields(user.id, deleted_at=utc_now())
            await session.commit()

        await self.audit.log_success(
            tenant.id, AuditAction.USER_DEACTIVATE, "user", entity_id=user.id, user_id=user.id
        )
        logger.info("Account deactivated", user_id=str(user.id), tenant_id=str(tenant.id))
        return MessageResponse(message="Account deactivated successfully")
