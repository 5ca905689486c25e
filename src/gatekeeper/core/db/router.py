"""Tenant connection routing.

Every engine operation acquires a session through a ConnectionRouter: one for the
shared directory (tenants, modules, tenant groups, audit) and one per tenant store
(principals, permissions, profiles, companies). Services never build sessions
themselves, so the routing policy can be swapped without touching them.
"""

from collections.abc import AsyncGenerator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.gatekeeper.core.db.session import get_session
from src.gatekeeper.models.public import Tenant


class ConnectionRouter(Protocol):
    """Hands out sessions bound to the directory or to one tenant's isolated store."""

    def directory(self) -> AbstractAsyncContextManager[AsyncSession]: ...

    def tenant(self, tenant: Tenant) -> AbstractAsyncContextManager[AsyncSession]: ...


class SchemaConnectionRouter:
    """Schema-per-tenant router on a single PostgreSQL database."""

    def __init__(self, engine: AsyncEngine | None = None):
        self._engine = engine

    @asynccontextmanager
    async def directory(self) -> AsyncGenerator[AsyncSession]:
        async with get_session(engine=self._engine) as session:
            yield session

    @asynccontextmanager
    async def tenant(self, tenant: Tenant) -> AsyncGenerator[AsyncSession]:
        async with get_session(tenant.schema_name, engine=self._engine) as session:
            yield session
