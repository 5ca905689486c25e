"""Authentication endpoints.

Thin HTTP adapter over AuthService: no business logic lives here. Engine
errors (AuthError subclasses) are mapped to status codes by the handlers
installed in core/exceptions.py.
"""

from fastapi import APIRouter
from starlette.requests import Request

from src.gatekeeper.api.dependencies import AuthServiceDep, BearerToken, CurrentPrincipal
from src.gatekeeper.core.rate_limit import (
    ACCOUNT_EMAIL_LIMIT,
    LOGIN_LIMIT,
    REFRESH_LIMIT,
    TWO_FACTOR_LIMIT,
    limiter,
)
from src.gatekeeper.schemas.auth import (
    AccessClaims,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    ResetPasswordRequest,
    SendVerificationRequest,
    SwitchTenantRequest,
    TwoFactorCodeRequest,
    TwoFactorDisableRequest,
    TwoFactorLoginRequest,
    TwoFactorRequired,
    TwoFactorSetupResponse,
    TwoFactorStatus,
    VerifyEmailRequest,
)
from src.gatekeeper.schemas.permissions import UserModules
from src.gatekeeper.schemas.tenant_group import TenantGroupRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse | TwoFactorRequired,
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse | TwoFactorRequired:
    """Authenticate with email (or full name) and password.

    The tenant comes from `tenant_slug`, or from the email domain when omitted.
    Accounts with 2FA enabled receive `requires_two_factor` instead of tokens
    and must complete the login at `/auth/2fa/verify`.
    """
    return await service.login(login_data.identifier, login_data.password, login_data.tenant_slug)


@router.post(
    "/2fa/verify",
    response_model=LoginResponse,
    responses={
        400: {"description": "2FA not enabled for this account"},
        401: {"description": "Invalid credentials or 2FA code"},
    },
)
@limiter.limit(TWO_FACTOR_LIMIT)
async def verify_two_factor(
    request: Request, data: TwoFactorLoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Complete a login that returned `requires_two_factor`."""
    return await service.verify_two_factor(data.email, data.tenant_slug, data.code)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={401: {"description": "Invalid or expired refresh token"}},
)
@limiter.limit(REFRESH_LIMIT)
async def refresh(
    request: Request, refresh_data: RefreshRequest, service: AuthServiceDep
) -> RefreshResponse:
    """Issue a new access token with permissions recomputed at call time."""
    return await service.refresh(refresh_data.refresh_token)


@router.post(
    "/switch-tenant",
    response_model=LoginResponse,
    responses={
        403: {"description": "No switch grant for the target tenant"},
        404: {"description": "Tenant not found"},
    },
)
async def switch_tenant(
    data: SwitchTenantRequest, token: BearerToken, service: AuthServiceDep
) -> LoginResponse:
    return await service.switch_tenant(token, data.tenant_id)


@router.get("/available-tenants", response_model=list[TenantGroupRead])
async def available_tenants(
    principal: CurrentPrincipal, service: AuthServiceDep
) -> list[TenantGroupRead]:
    """Tenants the caller may use, grouped by tenant group."""
    return await service.available_tenants(principal.user.email)


@router.get("/me", response_model=AccessClaims)
async def me(principal: CurrentPrincipal) -> AccessClaims:
    return principal.claims


@router.get("/me/modules", response_model=UserModules)
async def my_modules(token: BearerToken, service: AuthServiceDep) -> UserModules:
    """Effective permissions grouped by active module."""
    return await service.user_modules(token)


# Second factor


@router.post("/2fa/setup", response_model=TwoFactorSetupResponse)
async def setup_two_factor(token: BearerToken, service: AuthServiceDep) -> TwoFactorSetupResponse:
    return await service.begin_two_factor_setup(token)


@router.post("/2fa/enable", response_model=MessageResponse)
async def enable_two_factor(
    data: TwoFactorCodeRequest, token: BearerToken, service: AuthServiceDep
) -> MessageResponse:
    return await service.confirm_two_factor(token, data.code)


@router.post("/2fa/disable", response_model=MessageResponse)
async def disable_two_factor(
    data: TwoFactorDisableRequest, token: BearerToken, service: AuthServiceDep
) -> MessageResponse:
    return await service.disable_two_factor(token, data.password)


@router.get("/2fa/status", response_model=TwoFactorStatus)
async def two_factor_status(token: BearerToken, service: AuthServiceDep) -> TwoFactorStatus:
    return await service.two_factor_status(token)


# Account lifecycle


@router.post("/send-verification-email", response_model=MessageResponse)
@limiter.limit(ACCOUNT_EMAIL_LIMIT)
async def send_verification_email(
    request: Request, data: SendVerificationRequest, service: AuthServiceDep
) -> MessageResponse:
    return await service.send_verification_email(data.email, data.tenant_slug)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(data: VerifyEmailRequest, service: AuthServiceDep) -> MessageResponse:
    return await service.verify_email(data.token, data.email, data.tenant_slug)


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(ACCOUNT_EMAIL_LIMIT)
async def forgot_password(
    request: Request, data: ForgotPasswordRequest, service: AuthServiceDep
) -> MessageResponse:
    """Always answers the same way, whether or not the account exists."""
    return await service.forgot_password(data.email, data.tenant_slug)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(data: ResetPasswordRequest, service: AuthServiceDep) -> MessageResponse:
    return await service.reset_password(data.token, data.email, data.tenant_slug, data.new_password)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest, token: BearerToken, service: AuthServiceDep
) -> MessageResponse:
    return await service.change_password(token, data.current_password, data.new_password)


@router.post("/deactivate", response_model=MessageResponse)
async def deactivate(token: BearerToken, service: AuthServiceDep) -> MessageResponse:
    return await service.deactivate(token)
