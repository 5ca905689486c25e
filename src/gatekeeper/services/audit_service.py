"""Audit trail for authentication events.

Entries live in the directory, keyed by the tenant the event concerns, and carry
the client IP, user agent and request id captured by the audit-context middleware.
"""

from typing import Any
from uuid import UUID

from src.gatekeeper.core.audit_context import get_audit_context
from src.gatekeeper.core.db import ConnectionRouter
from src.gatekeeper.core.logging import get_logger
from src.gatekeeper.models.public import AuditAction, AuditLog, AuditStatus
from src.gatekeeper.repositories.public import AuditLogRepository

logger = get_logger(__name__)

MAX_ERROR_MESSAGE_LENGTH = 1000


def _value(member: AuditAction | AuditStatus | str) -> str:
    return member.value if isinstance(member, AuditAction | AuditStatus) else member


class AuditService:
    """Writes audit entries, each in its own directory session.

    A failed write is logged and swallowed: the authentication outcome the
    entry describes has already happened and must not be reversed by it.
    """

    def __init__(self, router: ConnectionRouter):
        self.router = router

    def _entry(
        self,
        tenant_id: UUID,
        action: AuditAction | str,
        entity_type: str,
        entity_id: UUID | None,
        user_id: UUID | None,
        changes: dict[str, Any] | None,
        status: AuditStatus | str,
        error_message: str | None,
    ) -> AuditLog:
        ctx = get_audit_context()
        return AuditLog(
            tenant_id=tenant_id,
            user_id=user_id,
            action=_value(action),
            entity_type=entity_type,
            entity_id=entity_id,
            changes=changes,
            ip_address=ctx.ip_address if ctx else None,
            user_agent=ctx.user_agent if ctx else None,
            request_id=ctx.request_id if ctx else None,
            status=_value(status),
            error_message=error_message[:MAX_ERROR_MESSAGE_LENGTH] if error_message else None,
        )

    async def log_action(
        self,
        tenant_id: UUID,
        action: AuditAction | str,
        entity_type: str,
        entity_id: UUID | None = None,
        user_id: UUID | None = None,
        changes: dict[str, Any] | None = None,
        status: AuditStatus | str = AuditStatus.SUCCESS,
        error_message: str | None = None,
    ) -> AuditLog | None:
        """Persist one entry.

        Returns:
            The stored entry, or None when the write failed.
        """
        entry = self._entry(
            tenant_id, action, entity_type, entity_id, user_id, changes, status, error_message
        )
        try:
            async with self.router.directory() as session:
                AuditLogRepository(session).add(entry)
                await session.commit()
        except Exception as e:
            logger.warning(
                "Audit entry not recorded",
                action=entry.action,
                tenant_id=str(tenant_id),
                error=str(e),
            )
            return None

        logger.debug("Audit entry recorded", action=entry.action, status=entry.status)
        return entry

    async def log_success(
        self,
        tenant_id: UUID,
        action: AuditAction | str,
        entity_type: str,
        entity_id: UUID | None = None,
        user_id: UUID | None = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog | None:
        return await self.log_action(
            tenant_id, action, entity_type, entity_id=entity_id, user_id=user_id, changes=changes
        )

    async def log_failure(
        self,
        tenant_id: UUID,
        action: AuditAction | str,
        entity_type: str,
        error_message: str,
        entity_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> AuditLog | None:
        return await self.log_action(
            tenant_id,
            action,
            entity_type,
            entity_id=entity_id,
            user_id=user_id,
            status=AuditStatus.FAILURE,
            error_message=error_message,
        )
