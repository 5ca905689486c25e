"""Cross-tenant grouping and switch authorization - public schema.

One real-world identity (keyed by email) may hold accounts in several tenant
stores. Switching between them is authorized by UserTenantAccess rows only;
there is no foreign key into any tenant store.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.gatekeeper.models.base import utc_now
from src.gatekeeper.models.enums import AccessLevel


class TenantGroup(SQLModel, table=True):
    __tablename__ = "tenant_groups"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    code: str = Field(max_length=50, unique=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class TenantGroupMember(SQLModel, table=True):
    """Display data for a tenant inside a group."""

    __tablename__ = "tenant_group_members"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_group_id: UUID = Field(foreign_key="public.tenant_groups.id", index=True)
    tenant_id: UUID = Field(foreign_key="public.tenants.id", index=True)
    display_name: str | None = Field(default=None, max_length=100)
    display_order: int = Field(default=0)
    is_default: bool = Field(default=False)
    is_active: bool = Field(default=True)


class UserTenantAccess(SQLModel, table=True):
    """Grant letting an email access (and optionally switch into) a tenant."""

    __tablename__ = "user_tenant_access"
    __table_args__ = (
        Index("ix_user_tenant_access_email_tenant", "email", "tenant_id"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, index=True)
    tenant_id: UUID = Field(foreign_key="public.tenants.id")
    tenant_group_id: UUID = Field(foreign_key="public.tenant_groups.id")
    can_access: bool = Field(default=True)
    can_switch: bool = Field(default=True)
    access_level: str | None = Field(default=AccessLevel.USER.value, max_length=20)
    granted_by: UUID | None = Field(default=None)
    granted_at: datetime = Field(default_factory=utc_now)
    revoked_at: datetime | None = Field(default=None)


class TenantSwitchLog(SQLModel, table=True):
    """Append-only record of every completed tenant switch."""

    __tablename__ = "tenant_switch_logs"
    __table_args__ = (
        Index("ix_tenant_switch_logs_email_created", "email", "created_at"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255)
    from_tenant_id: UUID
    to_tenant_id: UUID
    tenant_group_id: UUID | None = Field(default=None)
    ip_address: str | None = Field(max_length=45, default=None)  # IPv4/IPv6
    user_agent: str | None = Field(max_length=500, default=None)
    created_at: datetime = Field(default_factory=utc_now)
