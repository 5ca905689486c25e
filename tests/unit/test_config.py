"""Tests for Settings validation."""

import pytest
from pydantic import ValidationError

from src.gatekeeper.core.config import PLACEHOLDER_SECRET, Settings

pytestmark = pytest.mark.unit

ACCESS_SECRET = "a" * 32
REFRESH_SECRET = "b" * 32


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "postgresql+asyncpg://u:p@localhost/db",
        "jwt_secret_key": ACCESS_SECRET,
        "jwt_refresh_secret_key": REFRESH_SECRET,
        **overrides,
    }
    return Settings(_env_file=None, **values)


def test_valid_settings():
    settings = make_settings()
    assert settings.jwt_secret_key == ACCESS_SECRET
    assert settings.totp_valid_window == 2


def test_short_jwt_secret_rejected():
    with pytest.raises(ValidationError, match="at least 32 characters"):
        make_settings(jwt_secret_key="short")


def test_placeholder_secret_rejected():
    with pytest.raises(ValidationError, match="must be changed"):
        make_settings(jwt_refresh_secret_key=PLACEHOLDER_SECRET)


def test_refresh_secret_must_differ():
    with pytest.raises(ValidationError, match="must differ"):
        make_settings(jwt_refresh_secret_key=ACCESS_SECRET)


def test_cors_wildcard_rejected():
    with pytest.raises(ValidationError, match="wildcard"):
        make_settings(cors_origins=["*"])


def test_app_url_must_be_allowed_domain():
    with pytest.raises(ValidationError, match="not in allowed list"):
        make_settings(app_url="https://evil.example.net")


def test_app_url_subdomain_of_allowed_domain():
    settings = make_settings(
        allowed_app_url_domains=["acme.com"], app_url="https://app.acme.com"
    )
    assert settings.app_url == "https://app.acme.com"
