"""Security utilities - crypto, TOTP and validators.

Re-exports all security-related functions for convenience.
"""

from src.gatekeeper.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    DUMMY_PASSWORD_HASH,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    generate_flow_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.gatekeeper.core.security.totp import (
    generate_totp_secret,
    provisioning_uri,
    render_qr_data_uri,
    verify_totp_code,
)
from src.gatekeeper.core.security.validators import (
    is_valid_tenant_slug,
    slug_to_schema_name,
    validate_schema_name,
    validate_tenant_slug_format,
)

__all__ = [
    # Crypto
    "ACCESS_TOKEN_TYPE",
    "DUMMY_PASSWORD_HASH",
    "REFRESH_TOKEN_TYPE",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "decode_refresh_token",
    "generate_flow_token",
    "hash_password",
    "hash_token",
    "verify_password",
    # TOTP
    "generate_totp_secret",
    "provisioning_uri",
    "render_qr_data_uri",
    "verify_totp_code",
    # Validators
    "is_valid_tenant_slug",
    "slug_to_schema_name",
    "validate_schema_name",
    "validate_tenant_slug_format",
]
