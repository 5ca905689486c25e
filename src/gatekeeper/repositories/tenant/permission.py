"""Repositories for permission grants and profiles."""

from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import select

from src.gatekeeper.models.tenant import (
    Permission,
    UserPermission,
    UserProfile,
    UserProfilePermission,
    UserUserProfile,
)
from src.gatekeeper.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    """Repository for Permission entity in a tenant schema."""

    model = Permission

    async def list_granted(self, user_id: UUID) -> list[Permission]:
        """Union of direct and profile-inherited grants, one row per permission.

        Soft-deleted permissions and grants through soft-deleted profiles are
        excluded. Module gating is applied by the caller.
        """
        direct = select(UserPermission.permission_id).where(UserPermission.user_id == user_id)
        via_profile = (
            select(UserProfilePermission.permission_id)
            .join(
                UserUserProfile,
                UserUserProfile.profile_id == UserProfilePermission.profile_id,  # type: ignore[arg-type]
            )
            .join(UserProfile, UserProfile.id == UserUserProfile.profile_id)  # type: ignore[arg-type]
            .where(
                UserUserProfile.user_id == user_id,
                UserProfile.deleted_at.is_(None),  # type: ignore[union-attr]
            )
        )
        result = await self.session.execute(
            select(Permission)
            .where(
                or_(
                    Permission.id.in_(direct),  # type: ignore[attr-defined]
                    Permission.id.in_(via_profile),  # type: ignore[attr-defined]
                ),
                Permission.deleted_at.is_(None),  # type: ignore[union-attr]
            )
            .order_by(Permission.category, Permission.code)
        )
        return list(result.scalars().all())


class ProfileRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile entity in a tenant schema."""

    model = UserProfile

    async def get_default(self) -> UserProfile | None:
        result = await self.session.execute(
            select(UserProfile).where(
                UserProfile.is_default == True,  # noqa: E712
                UserProfile.deleted_at.is_(None),  # type: ignore[union-attr]
            )
        )
        return result.scalars().first()

    async def set_default(self, profile_id: UUID) -> bool:
        """Make one profile the default, clearing every other default first.

        Both statements run in the caller's transaction. Returns False when the
        profile does not exist (nothing is changed then; the caller rolls back).
        """
        await self._execute_update(
            update(UserProfile)
            .where(
                UserProfile.id != profile_id,  # type: ignore[arg-type]
                UserProfile.is_default == True,  # type: ignore[arg-type]  # noqa: E712
            )
            .values(is_default=False)
        )
        matched = await self._execute_update(
            update(UserProfile)
            .where(
                UserProfile.id == profile_id,  # type: ignore[arg-type]
                UserProfile.deleted_at.is_(None),  # type: ignore[union-attr]
            )
            .values(is_default=True)
        )
        return matched == 1
