"""Authentication orchestration - login, 2FA login, refresh, tenant switch.

AuthService wires the engine's collaborators together around one
ConnectionRouter and exposes the whole authentication surface in terms of
plain values and schemas, independent of HTTP.
"""

import asyncio
from uuid import UUID

from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.exceptions import InvalidCredentialsError
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.core.notifications import NotificationSender, ResendNotificationSender
from src.gatekeeper.core.security import DUMMY_PASSWORD_HASH, verify_password
from src.gatekeeper.models.public import AuditAction, Tenant
from src.gatekeeper.models.tenant import User
from src.gatekeeper.schemas.auth import (
    LoginResponse,
    MessageResponse,
    RefreshResponse,
    TwoFactorRequired,
    TwoFactorSetupResponse,
    TwoFactorStatus,
)
from src.gatekeeper.schemas.permissions import UserModules
from src.gatekeeper.schemas.tenant_group import TenantGroupRead
from src.gatekeeper.services.account_service import AccountService
from src.gatekeeper.services.audit_service import AuditService
from src.gatekeeper.services.credential_verifier import CredentialVerifier
from src.gatekeeper.services.permission_aggregator import PermissionAggregator
from src.gatekeeper.services.session_context import SessionContextLoader, build_login_response
from src.gatekeeper.services.tenant_directory import TenantDirectory
from src.gatekeeper.services.tenant_group_service import TenantGroupService
from src.gatekeeper.services.token_service import AuthenticatedPrincipal, TokenIssuer
from src.gatekeeper.services.two_factor_service import TwoFactorService

logger = get_logger(__name__)


class AuthService:
    """Top-level authentication flows.

    login -> (TwoFactorRequired -> verify_two_factor) -> LoginResponse;
    refresh and switch_tenant always rebuild the session from the stores.
    """

    def __init__(self, router: ConnectionRouter, notifier: NotificationSender | None = None):
        self.router = router
        self.audit = AuditService(router)
        self.directory = TenantDirectory(router)
        self.credentials = CredentialVerifier(router)
        self.aggregator = PermissionAggregator(router)
        self.loader = SessionContextLoader(router, self.aggregator)
        self.issuer = TokenIssuer(router, self.directory, self.loader)
        self.tenant_groups = TenantGroupService(
            router, self.directory, self.loader, self.issuer, self.audit
        )
        self.two_factor = TwoFactorService(router, self.directory, self.audit)
        self.accounts = AccountService(
            router, self.directory, notifier or ResendNotificationSender(), self.audit
        )

    # Session flows

    async def login(
        self, identifier: str, password: str, tenant_slug: str | None = None
    ) -> LoginResponse | TwoFactorRequired:
        """Authenticate with email (or full name) and password.

        Unknown tenant, unknown identifier, wrong password and locked account
        all raise the same InvalidCredentialsError.
        """
        tenant = await self.directory.resolve(tenant_slug, identifier)
        if tenant is None:
            # Same hashing cost as a real attempt
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed", reason="tenant_not_resolved")
            raise InvalidCredentialsError()

        user = await self.credentials.verify(tenant, identifier, password)
        if user is None:
            logger.info("Login failed", reason="credentials_rejected", tenant_id=str(tenant.id))
            await self.audit.log_failure(
                tenant.id, AuditAction.USER_LOGIN_FAILED, "user", error_message="Invalid credentials"
            )
            raise InvalidCredentialsError()

        if user.two_factor_enabled:
            logger.info("Login awaiting second factor", user_id=str(user.id), tenant_id=str(tenant.id))
            return TwoFactorRequired(
                user_id=user.id,
                email=user.email,
                tenant_id=tenant.id,
                tenant_slug=tenant.slug,
            )

        return await self._complete_login(tenant, user)

    async def verify_two_factor(self, email: str, tenant_slug: str, code: str) -> LoginResponse:
        tenant, user = await self.two_factor.verify_during_login(email, tenant_slug, code)
        return await self._complete_login(tenant, user)

    async def _complete_login(self, tenant: Tenant, user: User) -> LoginResponse:
        await self.credentials.record_success(tenant, user)
        context, tenant_groups = await asyncio.gather(
            self.loader.load(tenant, user),
            self.tenant_groups.available_tenants(user.email),
        )
        tokens = self.issuer.issue(user, tenant, context)

        await self.audit.log_success(
            tenant.id, AuditAction.USER_LOGIN, "user", entity_id=user.id, user_id=user.id
        )
        logger.info(
            "User logged in",
            user_id=str(user.id),
            tenant_id=str(tenant.id),
            permission_count=len(context.permissions),
        )
        return build_login_response(user, tenant, context, tokens, tenant_groups)

    async def refresh(self, refresh_token: str) -> RefreshResponse:
        return RefreshResponse(access_token=await self.issuer.refresh(refresh_token))

    async def authenticate(self, access_token: str) -> AuthenticatedPrincipal:
        return await self.issuer.authenticate(access_token)

    async def switch_tenant(self, access_token: str, target_tenant_id: UUID) -> LoginResponse:
        principal = await self.authenticate(access_token)
        return await self.tenant_groups.switch(
            principal.user.email, principal.tenant.id, target_tenant_id
        )

    async def available_tenants(self, email: str) -> list[TenantGroupRead]:
        return await self.tenant_groups.available_tenants(email)

    async def user_modules(self, access_token: str) -> UserModules:
        principal = await self.authenticate(access_token)
        modules, companies = await asyncio.gather(
            self.aggregator.modules_with_permissions(principal.tenant, principal.user.id),
            self.loader.companies(principal.tenant, principal.user.id),
        )
        codes = [p.code for module in modules for p in module.permissions]
        return UserModules(
            modules=modules,
            companies=companies,
            total_permissions=len(codes),
            permissions=codes,
        )

    # Second factor

    async def begin_two_factor_setup(self, access_token: str) -> TwoFactorSetupResponse:
        principal = await self.authenticate(access_token)
        return await self.two_factor.begin_setup(principal.tenant, principal.user)

    async def confirm_two_factor(self, access_token: str, code: str) -> MessageResponse:
        principal = await self.authenticate(access_token)
        await self.two_factor.confirm_enable(principal.tenant, principal.user, code)
        return MessageResponse(message="2FA enabled successfully")

    async def disable_two_factor(self, access_token: str, password: str) -> MessageResponse:
        principal = await self.authenticate(access_token)
        await self.two_factor.disable(principal.tenant, principal.user, password)
        return MessageResponse(message="2FA disabled successfully")

    async def two_factor_status(self, access_token: str) -> TwoFactorStatus:
        principal = await self.authenticate(access_token)
        return self.two_factor.status(principal.user)

    # Account lifecycle

    async def send_verification_email(self, email: str, tenant_slug: str | None) -> MessageResponse:
        return await self.accounts.send_verification_email(email, tenant_slug)

    async def verify_email(self, token: str, email: str, tenant_slug: str | None) -> MessageResponse:
        return await self.accounts.verify_email(token, email, tenant_slug)

    async def forgot_password(self, email: str, tenant_slug: str | None) -> MessageResponse:
        return await self.accounts.forgot_password(email, tenant_slug)

    async def reset_password(
        self, token: str, email: str, tenant_slug: str | None, new_password: str
    ) -> MessageResponse:
        return await self.accounts.reset_password(token, email, tenant_slug, new_password)

    async def change_password(
        self, access_token: str, current_password: str, new_password: str
    ) -> MessageResponse:
        principal = await self.authenticate(access_token)
        return await self.accounts.change_password(
            principal.tenant, principal.user, current_password, new_password
        )

    async def deactivate(self, access_token: str) -> MessageResponse:
        principal = await self.authenticate(access_token)
        return await self.accounts.deactivate(principal.tenant, principal.user)
