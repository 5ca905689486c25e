from pydantic import BaseModel

from src.gatekeeper.schemas.auth import CompanySummary


class PermissionRead(BaseModel):
    code: str
    action: str
    name: str

    model_config = {"from_attributes": True}


class ModulePermissions(BaseModel):
    code: str
    name: str
    icon: str
    permissions: list[PermissionRead]


class UserModules(BaseModel):
    """Effective permissions grouped by active module, for navigation menus."""

    modules: list[ModulePermissions]
    companies: list[CompanySummary]
    total_permissions: int
    permissions: list[str]
