"""Sessions pinned to one store of the shared PostgreSQL database.

The directory is the `public` schema; each tenant store is a `tenant_<slug>`
schema. A session sees exactly one of them through `search_path`.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, async_sessionmaker

from src.gatekeeper.core.db.engine import get_engine
from src.gatekeeper.core.security.validators import validate_schema_name

DIRECTORY_SCHEMA = "public"


async def _set_search_path(connection: AsyncConnection, schema: str) -> None:
    quoted = connection.dialect.identifier_preparer.quote_schema(schema)
    await connection.execute(text(f"SET search_path TO {quoted}"))
    await connection.commit()


@asynccontextmanager
async def get_session(
    tenant_schema: str | None = None,
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Open a session on the directory, or on one tenant schema.

    A tenant session's search_path holds only that schema, so an unqualified
    `users` can never resolve to another tenant's table. Directory models are
    declared with `schema="public"` and stay reachable from either kind.

    Raises:
        ValueError: tenant_schema is not a well-formed tenant schema name.
    """
    if tenant_schema is not None:
        validate_schema_name(tenant_schema)

    async with (engine or get_engine()).connect() as connection:
        await _set_search_path(connection, tenant_schema or DIRECTORY_SCHEMA)
        factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        try:
            async with factory() as session:
                yield session
        finally:
            # Pooled connections go back pointing at the directory
            if tenant_schema is not None and not connection.closed:
                await _set_search_path(connection, DIRECTORY_SCHEMA)
