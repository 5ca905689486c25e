"""Shared repository plumbing."""

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, func
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel


def email_equals(column: Any, email: str) -> ColumnElement[bool]:
    """Case-insensitive email match; addresses are stored as the user typed them."""
    return func.lower(column) == email.strip().lower()


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Data access bound to one session of one store.

    The session decides which store (directory or a tenant) is reached.
    Repositories never commit; the owning service does.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def _execute_update(self, stmt: Any) -> int:
        """Run a bulk UPDATE and return how many rows matched its WHERE clause.

        Conditional redemptions rely on this count being 0 for the loser of a race.
        """
        result = await self.session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount or 0
