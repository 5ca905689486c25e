"""Shared enums for models."""

from enum import Enum


class AccessLevel(str, Enum):
    """Role an identity holds in a tenant it may access through a tenant group."""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class TwoFactorMethod(str, Enum):
    AUTHENTICATOR = "authenticator"  # RFC 6238 TOTP app
