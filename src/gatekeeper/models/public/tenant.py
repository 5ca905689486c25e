"""Tenant registry and module activation - public schema."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.gatekeeper.core.security.validators import (
    MAX_TENANT_SLUG_LENGTH,
    slug_to_schema_name,
    validate_schema_name,
)
from src.gatekeeper.models.base import utc_now


class Tenant(SQLModel, table=True):
    """Tenant registry in public schema.

    Provisioned outside this service; read-only here.
    """

    __tablename__ = "tenants"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, index=True)
    slug: str = Field(max_length=MAX_TENANT_SLUG_LENGTH, unique=True, index=True)
    custom_domain: str | None = Field(default=None, max_length=255, index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)

    @property
    def schema_name(self) -> str:
        """Get the schema name for this tenant's store.

        Raises:
            ValueError: If the resulting schema name exceeds PostgreSQL's 63-char limit
                or contains invalid characters
        """
        name = slug_to_schema_name(self.slug)
        validate_schema_name(name)
        return name

    @property
    def is_deleted(self) -> bool:
        """Check if tenant is soft-deleted."""
        return self.deleted_at is not None


class Module(SQLModel, table=True):
    """Feature module catalogue. `code` is the category permissions are tagged with."""

    __tablename__ = "modules"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    code: str = Field(max_length=50, unique=True, index=True)
    name: str = Field(max_length=100)


class TenantModule(SQLModel, table=True):
    """Activation of a module for a tenant."""

    __tablename__ = "tenant_modules"
    __table_args__ = (
        UniqueConstraint("tenant_id", "module_id", name="uq_tenant_modules_tenant_module"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="public.tenants.id", index=True)
    module_id: UUID = Field(foreign_key="public.modules.id")
    is_enabled: bool = Field(default=True)
    expires_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)
