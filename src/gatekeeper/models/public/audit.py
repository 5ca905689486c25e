"""Audit log model for security-relevant authentication events."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.gatekeeper.models.base import utc_now


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    # Session
    USER_LOGIN = "user.login"
    USER_LOGIN_FAILED = "user.login_failed"
    TENANT_SWITCH = "tenant.switch"

    # Second factor
    TWO_FACTOR_ENABLE = "2fa.enable"
    TWO_FACTOR_DISABLE = "2fa.disable"

    # Account lifecycle
    USER_EMAIL_VERIFY = "user.email_verify"
    PASSWORD_RESET_REQUEST = "password.reset_request"
    PASSWORD_RESET = "password.reset"
    PASSWORD_CHANGE = "password.change"
    USER_DEACTIVATE = "user.deactivate"

    # Directory
    ACCESS_GRANT = "access.grant"
    ACCESS_REVOKE = "access.revoke"


class AuditStatus(str, Enum):
    """Audit log status."""

    SUCCESS = "success"
    FAILURE = "failure"


class AuditLog(SQLModel, table=True):
    """Audit log for authentication events.

    Stored in public schema for centralized querying. `user_id` refers to a
    principal inside the tenant store named by `tenant_id`, so it carries no
    foreign key.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_tenant_created", "tenant_id", "created_at"),
        Index("ix_audit_logs_user_created", "user_id", "created_at"),
        Index("ix_audit_logs_action_created", "action", "created_at"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: UUID = Field(foreign_key="public.tenants.id", index=True)
    user_id: UUID | None = Field(default=None)

    action: str = Field(max_length=50)  # AuditAction value
    entity_type: str = Field(max_length=50)  # "user", "tenant", "user_tenant_access"
    entity_id: UUID | None = Field(default=None)

    changes: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True),
    )

    # Request metadata
    ip_address: str | None = Field(max_length=45, default=None)
    user_agent: str | None = Field(max_length=500, default=None)
    request_id: str | None = Field(max_length=36, default=None)  # Correlation ID

    status: str = Field(default=AuditStatus.SUCCESS.value, max_length=20)
    error_message: str | None = Field(max_length=1000, default=None)

    created_at: datetime = Field(default_factory=utc_now)
