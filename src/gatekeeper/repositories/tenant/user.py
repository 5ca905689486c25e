"""Repository for the tenant-scoped principal."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import select

from src.gatekeeper.models.base import utc_now
from src.gatekeeper.models.tenant import User
from src.gatekeeper.repositories.base import BaseRepository, email_equals

_not_deleted = User.deleted_at.is_(None)  # type: ignore[union-attr]


class UserRepository(BaseRepository[User]):
    """Repository for User entity in a tenant schema."""

    model = User

    async def get_active_by_id(self, user_id: UUID) -> User | None:
        result = await self.session.execute(
            select(User).where(User.id == user_id, _not_deleted)
        )
        return result.scalar_one_or_none()

    async def get_active_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User)
            .where(email_equals(User.email, email), _not_deleted)
            .order_by(User.created_at)
            .limit(1)
        )
        return result.scalars().first()

    async def get_active_by_identifier(self, identifier: str) -> User | None:
        """Get a principal by email or full name; the oldest match wins."""
        result = await self.session.execute(
            select(User)
            .where(
                or_(email_equals(User.email, identifier), User.full_name == identifier),
                _not_deleted,
            )
            .order_by(User.created_at)
            .limit(1)
        )
        return result.scalars().first()

    async def record_failed_login(self, user_id: UUID) -> None:
        """Increment the failed attempt counter in place."""
        await self._execute_update(
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .values(failed_login_attempts=User.failed_login_attempts + 1)
        )

    async def record_successful_login(self, user_id: UUID, ip_address: str | None) -> None:
        now = utc_now()
        await self._execute_update(
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .values(failed_login_attempts=0, last_login_at=now, last_login_ip=ip_address)
        )

    async def redeem_verification_token(self, user_id: UUID, token_hash: str) -> bool:
        """Mark verified and clear the token iff the stored hash still matches.

        Single conditional UPDATE: of two concurrent redemptions exactly one
        sees a matched row.
        """
        now = utc_now()
        matched = await self._execute_update(
            update(User)
            .where(
                User.id == user_id,  # type: ignore[arg-type]
                User.verification_token_hash == token_hash,  # type: ignore[arg-type]
                _not_deleted,
            )
            .values(
                is_verified=True,
                email_verified_at=now,
                verification_token_hash=None,
                updated_at=now,
            )
        )
        return matched == 1

    async def redeem_password_reset_token(
        self,
        user_id: UUID,
        token_hash: str,
        new_password_hash: str,
        now: datetime | None = None,
    ) -> bool:
        """Set the new password and clear the token iff it matches and has not expired."""
        now = now or utc_now()
        matched = await self._execute_update(
            update(User)
            .where(
                User.id == user_id,  # type: ignore[arg-type]
                User.password_reset_token_hash == token_hash,  # type: ignore[arg-type]
                User.password_reset_expires_at > now,  # type: ignore[operator]
                _not_deleted,
            )
            .values(
                password_hash=new_password_hash,
                password_changed_at=now,
                password_reset_token_hash=None,
                password_reset_expires_at=None,
                updated_at=now,
            )
        )
        return matched == 1

    async def update_fields(self, user_id: UUID, **values: object) -> bool:
        """Update columns of a live principal, stamping updated_at."""
        matched = await self._execute_update(
            update(User)
            .where(User.id == user_id, _not_deleted)  # type: ignore[arg-type]
            .values(**values, updated_at=utc_now())
        )
        return matched == 1
