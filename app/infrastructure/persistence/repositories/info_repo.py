"""Info repository: paged listing ordered by id."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.reference import InfoItem
from app.infrastructure.persistence.models.info import Info
from app.infrastructure.persistence.repositories.base import BaseRepository


class InfoRepository(BaseRepository[Info]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Info)

    async def get_page(
        self, page_number: int, page_size: int
    ) -> tuple[list[InfoItem], int]:
        """Return (items for 1-based page_number, total row count)."""
        total = (
            await self.db.execute(select(func.count()).select_from(Info))
        ).scalar_one()
        result = await self.db.execute(
            select(Info)
            .order_by(Info.id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
        )
        items = [
            InfoItem(id=i.id, title=i.title, content=i.content, created_at=i.created_at)
            for i in result.scalars().all()
        ]
        return items, int(total or 0)
