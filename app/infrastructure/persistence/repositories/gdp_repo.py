"""Gdp repository: inclusive year-range queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.reference import GdpItem
from app.infrastructure.persistence.models.gdp import Gdp
from app.infrastructure.persistence.repositories.base import BaseRepository


class GdpRepository(BaseRepository[Gdp]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Gdp)

    async def get_range(self, year_start: int, year_end: int) -> list[GdpItem]:
        result = await self.db.execute(
            select(Gdp)
            .where(Gdp.year >= year_start, Gdp.year <= year_end)
            .order_by(Gdp.year, Gdp.id)
        )
        return [
            GdpItem(id=g.id, year=g.year, value=float(g.value), region=g.region)
            for g in result.scalars().all()
        ]
