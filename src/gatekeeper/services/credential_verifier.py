"""Password verification inside one tenant store."""

from src.gatekeeper.core.audit_context import get_audit_context
from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.core.security import DUMMY_PASSWORD_HASH, verify_password
from src.gatekeeper.models.public import Tenant
from src.gatekeeper.models.tenant import User
from src.gatekeeper.repositories.tenant import UserRepository

logger = get_logger(__name__)


class CredentialVerifier:
    """Checks an identifier (email or full name) and password for a tenant."""

    def __init__(self, router: ConnectionRouter):
        self.router = router

    async def verify(self, tenant: Tenant, identifier: str, secret: str) -> User | None:
        """Return the principal on success, None on any failure.

        The failure cases (unknown identifier, wrong password, locked account)
        are deliberately not distinguished in the return value. A wrong password
        is counted here; success is recorded by `record_success` once every
        factor has been proven.
        """
        async with self.router.tenant(tenant) as session:
            repo = UserRepository(session)
            user = await repo.get_active_by_identifier(identifier)

            # Always perform password verification so timing does not reveal
            # whether the identifier exists in this tenant
            password_hash = user.password_hash if user else DUMMY_PASSWORD_HASH
            password_valid = verify_password(secret, password_hash)

            if user is None:
                return None

            if user.is_locked():
                logger.info("Login rejected for locked account", user_id=str(user.id))
                return None

            if not password_valid:
                await repo.record_failed_login(user.id)
                await session.commit()
                return None

            return user

    async def record_success(self, tenant: Tenant, user: User) -> None:
        """Reset the failed attempt counter and stamp the login time and client IP."""
        ctx = get_audit_context()
        async with self.router.tenant(tenant) as session:
            await UserRepository(session).record_successful_login(
                user.id, ctx.ip_address if ctx else None
            )
            await session.commit()
