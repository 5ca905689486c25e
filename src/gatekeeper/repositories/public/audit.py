"""Audit trail queries (directory)."""

from collections.abc import Iterable
from uuid import UUID

from sqlmodel import select

from src.gatekeeper.models.public import AuditAction, AuditLog
from src.gatekeeper.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def history(
        self,
        tenant_id: UUID,
        actions: Iterable[AuditAction | str] = (),
        user_id: UUID | None = None,
        limit: int = 100,
    ) -> list[AuditLog]:
        """Entries for a tenant in the order they were written.

        Args:
            tenant_id: Tenant the entries were recorded against.
            actions: Restrict to these actions; empty means all.
            user_id: Restrict to one acting principal.
            limit: Maximum number of entries.
        """
        query = select(AuditLog).where(AuditLog.tenant_id == tenant_id)

        wanted = [a.value if isinstance(a, AuditAction) else a for a in actions]
        if wanted:
            query = query.where(AuditLog.action.in_(wanted))  # type: ignore[attr-defined]
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)

        query = query.order_by(AuditLog.created_at).limit(limit)  # type: ignore[arg-type]
        result = await self.session.execute(query)
        return list(result.scalars().all())
