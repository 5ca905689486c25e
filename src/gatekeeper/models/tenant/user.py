"""Principal model - one row per person per tenant store."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.gatekeeper.models.base import utc_now


class User(SQLModel, table=True):
    """Tenant-scoped principal.

    Note: No schema= argument in __table_args__ - relies on search_path
    set by the connection router for schema isolation.
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    full_name: str = Field(max_length=100, index=True)
    is_admin: bool = Field(default=False)

    # Email verification
    is_verified: bool = Field(default=False)
    email_verified_at: datetime | None = Field(default=None)
    verification_token_hash: str | None = Field(default=None, max_length=64, index=True)

    # Second factor
    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: str | None = Field(default=None, max_length=64)

    # Login bookkeeping
    last_login_at: datetime | None = Field(default=None)
    last_login_ip: str | None = Field(default=None, max_length=45)
    failed_login_attempts: int = Field(default=0)
    locked_until: datetime | None = Field(default=None)

    # Password lifecycle
    password_changed_at: datetime | None = Field(default=None)
    password_reset_token_hash: str | None = Field(default=None, max_length=64, index=True)
    password_reset_expires_at: datetime | None = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_locked(self, now: datetime | None = None) -> bool:
        """Explicit lockout gate; failed attempts alone never set it."""
        if self.locked_until is None:
            return False
        return self.locked_until > (now or utc_now())
