from uuid import UUID

from pydantic import BaseModel


class AvailableTenant(BaseModel):
    tenant_id: UUID
    tenant_slug: str
    tenant_name: str
    display_name: str
    display_order: int
    is_default: bool
    access_level: str | None
    can_switch: bool


class TenantGroupRead(BaseModel):
    """Tenants one identity may use, grouped by tenant group."""

    tenant_group_id: UUID
    tenant_group_name: str
    tenant_group_code: str
    tenants: list[AvailableTenant]
