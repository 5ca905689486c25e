"""Cryptographic utilities - password hashing, JWT tokens, and token hashing."""

import secrets
from datetime import UTC, datetime, timedelta
from hashlib import sha256
from typing import Any
from uuid import uuid4

import argon2
from jose import JWTError, jwt

from src.gatekeeper.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_token(token: str) -> str:
    """Hash an opaque flow token using SHA256 for storage."""
    return sha256(token.encode()).hexdigest()


def generate_flow_token() -> str:
    """Generate a single-use, URL-safe token for verification and reset links."""
    return secrets.token_urlsafe(32)


def _create_password_hasher() -> argon2.PasswordHasher:
    """Create password hasher with settings from config."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


_password_hasher = _create_password_hasher()

# Verified against when no principal matches, so unknown identifiers cost the same
DUMMY_PASSWORD_HASH = _password_hasher.hash(secrets.token_urlsafe(16))


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _password_hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        _password_hasher.verify(hashed, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.VerificationError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create a signed access token carrying the resolved session claims.

    Args:
        claims: Identity, tenant, companies and permission snapshot. Must include 'sub'.
        expires_delta: Override of the configured access token lifetime.
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode = {
        **claims,
        "iat": now,
        "exp": expire,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_refresh_token(
    subject: str,
    tenant_id: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a refresh token carrying only subject and tenant.

    Signed with the refresh secret so that an access-token secret compromise
    cannot be used to mint refresh tokens, and vice versa. A unique jti keeps
    tokens issued in the same second distinct.
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.refresh_token_expire_days))

    to_encode = {
        "sub": subject,
        "tenant_id": tenant_id,
        "iat": now,
        "exp": expire,
        "type": REFRESH_TOKEN_TYPE,
        "jti": str(uuid4()),
    }
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_refresh_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def _decode(token: str, secret: str, expected_type: str) -> dict[str, Any] | None:
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    if payload.get("type") != expected_type:
        return None
    return payload


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token. Returns None on any error."""
    return _decode(token, get_settings().jwt_secret_key, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a refresh token. Returns None on any error."""
    return _decode(token, get_settings().jwt_refresh_secret_key, REFRESH_TOKEN_TYPE)
