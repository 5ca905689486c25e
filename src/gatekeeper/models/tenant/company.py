"""Companies a principal works for - tenant schema."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Company(SQLModel, table=True):
    __tablename__ = "companies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200)
    code: str | None = Field(default=None, max_length=50)
    deleted_at: datetime | None = Field(default=None)


class UserCompany(SQLModel, table=True):
    __tablename__ = "user_companies"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    company_id: UUID = Field(foreign_key="companies.id", primary_key=True)
    is_primary: bool = Field(default=False)
