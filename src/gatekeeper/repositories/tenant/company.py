"""Repository for the companies a principal belongs to."""

from uuid import UUID

from sqlmodel import select

from src.gatekeeper.models.tenant import Company, UserCompany
from src.gatekeeper.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    model = Company

    async def list_for_user(self, user_id: UUID) -> list[tuple[Company, bool]]:
        """(company, is_primary) pairs, primary first."""
        result = await self.session.execute(
            select(Company, UserCompany.is_primary)
            .join(UserCompany, UserCompany.company_id == Company.id)  # type: ignore[arg-type]
            .where(
                UserCompany.user_id == user_id,
                Company.deleted_at.is_(None),  # type: ignore[union-attr]
            )
            .order_by(UserCompany.is_primary.desc(), Company.name)  # type: ignore[attr-defined]
        )
        return [(company, bool(is_primary)) for company, is_primary in result.all()]
