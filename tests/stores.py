"""In-process stand-ins for the database router and the email provider."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.gatekeeper.models import DIRECTORY_TABLES, TENANT_TABLES
from src.gatekeeper.models.public import Tenant


def _sqlite_engine(path: Path) -> AsyncEngine:
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


class SqliteConnectionRouter:
    """ConnectionRouter over one SQLite file per store.

    The directory and every tenant store are separate files, so a query that
    reaches for the wrong store fails instead of leaking rows. Directory models
    are declared in the `public` schema; SQLite has none, so the directory
    engine translates `public` to the default schema.
    """

    def __init__(self, base_path: Path):
        self.base_path = base_path
        self._directory_engine = _sqlite_engine(base_path / "directory.db").execution_options(
            schema_translate_map={"public": None}
        )
        self._tenant_engines: dict[str, AsyncEngine] = {}

    async def create_directory(self) -> None:
        async with self._directory_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all, tables=DIRECTORY_TABLES)

    async def provision(self, tenant: Tenant) -> None:
        """Create an empty store for a tenant."""
        engine = _sqlite_engine(self.base_path / f"tenant_{tenant.slug}.db")
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all, tables=TENANT_TABLES)
        self._tenant_engines[tenant.slug] = engine

    async def dispose(self) -> None:
        await self._directory_engine.dispose()
        for engine in self._tenant_engines.values():
            await engine.dispose()

    @staticmethod
    @asynccontextmanager
    async def _session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
        factory = async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        async with factory() as session:
            yield session

    def directory(self):  # type: ignore[no-untyped-def]
        return self._session(self._directory_engine)

    def tenant(self, tenant: Tenant):  # type: ignore[no-untyped-def]
        return self._session(self._tenant_engines[tenant.slug])


@dataclass
class SentMessage:
    to: str
    tenant_id: UUID
    subject: str
    html_body: str


class RecordingNotifier:
    """NotificationSender that keeps every message in memory."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[SentMessage] = []

    def send(self, to: str, tenant_id: UUID, subject: str, html_body: str) -> bool:
        self.sent.append(SentMessage(to, tenant_id, subject, html_body))
        return self.succeed

    @property
    def last(self) -> SentMessage:
        return self.sent[-1]


class SlowNotifier(RecordingNotifier):
    """RecordingNotifier whose provider takes `delay` seconds per message."""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay

    def send(self, to: str, tenant_id: UUID, subject: str, html_body: str) -> bool:
        time.sleep(self.delay)
        return super().send(to, tenant_id, subject, html_body)
