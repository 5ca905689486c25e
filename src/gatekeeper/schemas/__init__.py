from src.gatekeeper.schemas.auth import (
    AccessClaims,
    ChangePasswordRequest,
    CompanySummary,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    ResetPasswordRequest,
    SendVerificationRequest,
    SwitchTenantRequest,
    TenantSummary,
    TokenPair,
    TwoFactorCodeRequest,
    TwoFactorDisableRequest,
    TwoFactorLoginRequest,
    TwoFactorRequired,
    TwoFactorSetupResponse,
    TwoFactorStatus,
    UserSummary,
    VerifyEmailRequest,
)
from src.gatekeeper.schemas.permissions import ModulePermissions, PermissionRead, UserModules
from src.gatekeeper.schemas.tenant_group import AvailableTenant, TenantGroupRead

__all__ = [
    "AccessClaims",
    "AvailableTenant",
    "ChangePasswordRequest",
    "CompanySummary",
    "ForgotPasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "ModulePermissions",
    "PermissionRead",
    "RefreshRequest",
    "RefreshResponse",
    "ResetPasswordRequest",
    "SendVerificationRequest",
    "SwitchTenantRequest",
    "TenantGroupRead",
    "TenantSummary",
    "TokenPair",
    "TwoFactorCodeRequest",
    "TwoFactorDisableRequest",
    "TwoFactorLoginRequest",
    "TwoFactorRequired",
    "TwoFactorSetupResponse",
    "TwoFactorStatus",
    "UserModules",
    "UserSummary",
    "VerifyEmailRequest",
]
