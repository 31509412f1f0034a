"""Reference data use case: Info pages and Gdp year ranges, served cache-aside."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.application.dtos.reference import PagedData
from app.core.constants import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.domain.exceptions import ValidationException
from app.infrastructure.cache.keys import gdp_range_key, info_page_key, query_label

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IGdpRepository, IInfoRepository
    from app.application.services.cached_query_service import CachedQueryService


class ReferenceDataService:
    """Public listings backed by the system of record and the query cache.

    Info pages change often and use the volatile TTL; Gdp figures are
    effectively static and use the stable TTL.
    """

    def __init__(
        self,
        info_repo: "IInfoRepository",
        gdp_repo: "IGdpRepository",
        query_cache: "CachedQueryService",
        *,
        volatile_ttl: int,
        stable_ttl: int,
    ) -> None:
        self.info_repo = info_repo
        self.gdp_repo = gdp_repo
        self.query_cache = query_cache
        self.volatile_ttl = volatile_ttl
        self.stable_ttl = stable_ttl

    async def list_info(
        self,
        page_number: int = DEFAULT_PAGE_NUMBER,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Return {query, data} where data is one page of Info with paging metadata."""
        if page_number < 1:
            raise ValidationException("pageNumber must be at least 1", field="pageNumber")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationException(
                f"pageSize must be between 1 and {MAX_PAGE_SIZE}", field="pageSize"
            )

        async def compute() -> dict[str, Any]:
            items, total = await self.info_repo.get_page(page_number, page_size)
            return PagedData(
                page_number=page_number,
                page_size=page_size,
                total_count=total,
                data=items,
            ).to_dict()

        return await self.query_cache.get(
            info_page_key(page_number, page_size),
            query_label(page_number, page_size),
            compute,
            self.volatile_ttl,
        )

    async def gdp_range(self, year_start: int, year_end: int) -> dict[str, Any]:
        """Return {query, data} where data lists Gdp records for the inclusive year range."""
        if year_start > year_end:
            raise ValidationException(
                "yearStart must not be greater than yearEnd", field="yearStart"
            )

        async def compute() -> list[dict[str, Any]]:
            items = await self.gdp_repo.get_range(year_start, year_end)
            return [item.to_dict() for item in items]

        return await self.query_cache.get(
            gdp_range_key(year_start, year_end),
            query_label(year_start, year_end),
            compute,
            self.stable_ttl,
        )
