from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator
from zxcvbn import zxcvbn

from src.gatekeeper.schemas.tenant_group import TenantGroupRead

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3

TOTP_CODE_PATTERN = r"^\d{6}$"


def validate_password_strength(v: str) -> str:
    """Validate password strength using zxcvbn entropy estimation."""
    result = zxcvbn(v)
    score = result["score"]  # 0-4 scale

    if score < MIN_PASSWORD_SCORE:
        feedback = result.get("feedback", {})
        warning = feedback.get("warning", "")
        suggestions = feedback.get("suggestions", [])

        if warning:
            raise ValueError(f"Weak password: {warning}")
        elif suggestions:
            raise ValueError(f"Weak password: {suggestions[0]}")
        else:
            raise ValueError(
                "Password is too weak. Use a longer password with a mix of characters."
            )

    return v


class LoginRequest(BaseModel):
    """Credentials; `identifier` is the account email or its full name."""

    identifier: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)
    tenant_slug: str | None = Field(default=None, max_length=56)


class UserSummary(BaseModel):
    id: UUID
    email: str
    full_name: str
    is_admin: bool
    is_verified: bool
    two_factor_enabled: bool

    model_config = {"from_attributes": True}


class TenantSummary(BaseModel):
    id: UUID
    slug: str
    name: str

    model_config = {"from_attributes": True}


class CompanySummary(BaseModel):
    id: UUID
    name: str
    is_primary: bool


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenPair):
    """Completed login: tokens plus everything the client shows after sign-in."""

    user: UserSummary
    tenant: TenantSummary
    companies: list[CompanySummary]
    tenant_groups: list[TenantGroupRead]


class TwoFactorRequired(BaseModel):
    """Password accepted but a TOTP code is still needed. Carries no token."""

    requires_two_factor: Literal[True] = True
    user_id: UUID
    email: str
    tenant_id: UUID
    tenant_slug: str


class TwoFactorLoginRequest(BaseModel):
    email: EmailStr
    tenant_slug: str = Field(min_length=1, max_length=56)
    code: str = Field(pattern=TOTP_CODE_PATTERN)


class RefreshRequest(BaseModel):
    refresh_token: str


class RefreshResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SwitchTenantRequest(BaseModel):
    tenant_id: UUID


class AccessClaims(BaseModel):
    """Verified content of an access token."""

    sub: UUID
    email: str
    full_name: str
    is_admin: bool
    tenant_id: UUID
    tenant_slug: str
    tenant_group_id: UUID | None = None
    available_tenants: list[UUID] = Field(default_factory=list)
    companies: list[UUID] = Field(default_factory=list)
    primary_company: UUID | None = None
    permissions: list[str] = Field(default_factory=list)


class TwoFactorSetupResponse(BaseModel):
    secret: str
    qr_payload: str  # otpauth:// provisioning URI
    qr_code: str  # PNG data URI of qr_payload


class TwoFactorCodeRequest(BaseModel):
    code: str = Field(pattern=TOTP_CODE_PATTERN)


class TwoFactorDisableRequest(BaseModel):
    password: str = Field(min_length=1, max_length=128)


class TwoFactorStatus(BaseModel):
    enabled: bool
    method: str | None = None


class SendVerificationRequest(BaseModel):
    email: EmailStr
    tenant_slug: str | None = Field(default=None, max_length=56)


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=32, max_length=128)
    email: EmailStr
    tenant_slug: str | None = Field(default=None, max_length=56)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr
    tenant_slug: str | None = Field(default=None, max_length=56)


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=32, max_length=128)
    email: EmailStr
    tenant_slug: str | None = Field(default=None, max_length=56)
    new_password: str = Field(min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def check_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def check_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class MessageResponse(BaseModel):
    message: str
