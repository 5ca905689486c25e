from functools import lru_cache
from urllib.parse import urlparse

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRET = "change-this-to-a-secure-random-string"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Gatekeeper"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance
    allowed_app_url_domains: list[str] = ["localhost", "127.0.0.1"]

    # Database (directory lives in the public schema, tenants in tenant_<slug> schemas)
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 0  # 0 keeps asyncpg safe behind pgbouncer

    # Tokens
    jwt_secret_key: str
    jwt_refresh_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15  # Bounds how long a revoked permission stays visible
    refresh_token_expire_days: int = 7

    # Password hashing
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Second factor
    totp_issuer: str = "Gatekeeper"
    totp_valid_window: int = 2  # Steps of 30s accepted either side of server time

    # Account lifecycle
    password_reset_expire_minutes: int = 60
    app_url: str = "http://localhost:3000"  # Frontend URL for verification / reset links
    default_locale: str = "en"

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("jwt_secret_key", "jwt_refresh_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == PLACEHOLDER_SECRET:
            raise ValueError(
                "JWT secrets must be changed from the default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT secrets must be at least 32 characters")
        return v

    @field_validator("jwt_refresh_secret_key")
    @classmethod
    def validate_refresh_secret_differs(cls, v: str, info: ValidationInfo) -> str:
        """A leaked access secret must not be usable to mint refresh tokens."""
        if v == info.data.get("jwt_secret_key"):
            raise ValueError("JWT_REFRESH_SECRET_KEY must differ from JWT_SECRET_KEY")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str, info: ValidationInfo) -> str:
        """Validate APP_URL is from allowed domain list to prevent phishing links in emails."""
        allowed = info.data.get("allowed_app_url_domains", ["localhost", "127.0.0.1"])
        parsed = urlparse(v)
        hostname = parsed.hostname or ""

        if not any(hostname == domain or hostname.endswith(f".{domain}") for domain in allowed):
            raise ValueError(
                f"APP_URL domain '{hostname}' not in allowed list. "
                f"Add it to ALLOWED_APP_URL_DOMAINS or use: {allowed}"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
