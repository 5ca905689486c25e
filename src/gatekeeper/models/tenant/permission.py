"""Permission catalogue, profiles and grants - tenant schema."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.gatekeeper.models.base import utc_now


class Permission(SQLModel, table=True):
    """A capability. `category` equals the owning module's code."""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    module_code: str = Field(max_length=50)
    code: str = Field(max_length=100, unique=True, index=True)  # e.g. "HR.approve"
    action: str = Field(max_length=50)
    name: str = Field(max_length=100)
    category: str = Field(max_length=50, index=True)
    deleted_at: datetime | None = Field(default=None)


class UserProfile(SQLModel, table=True):
    """Named, reusable bundle of permissions."""

    __tablename__ = "user_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    is_default: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)


class UserProfilePermission(SQLModel, table=True):
    __tablename__ = "user_profile_permissions"

    profile_id: UUID = Field(foreign_key="user_profiles.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)


class UserUserProfile(SQLModel, table=True):
    __tablename__ = "user_user_profiles"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    profile_id: UUID = Field(foreign_key="user_profiles.id", primary_key=True)


class UserPermission(SQLModel, table=True):
    """Direct grant, for permissions not inherited through any profile."""

    __tablename__ = "user_permissions"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)
