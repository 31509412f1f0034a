"""Public reference data: Info listing and Gdp figures (cache-aside).

Results are cached as {"query": label, "data": ...}; clients receive only
the data part.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_reference_data_service
from app.application.use_cases.reference_data import ReferenceDataService
from app.core.constants import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.schemas.business import GdpResponse, InfoPage

router = APIRouter()

YEAR_MIN = 1900
YEAR_MAX = 2100


@router.get("/public/info", response_model=InfoPage)
async def list_info(
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    page_number: Annotated[int, Query(alias="pageNumber", ge=1)] = DEFAULT_PAGE_NUMBER,
    page_size: Annotated[
        int, Query(alias="pageSize", ge=1, le=MAX_PAGE_SIZE)
    ] = DEFAULT_PAGE_SIZE,
):
    """Return one page of Info with paging metadata (cached for 10 minutes)."""
    cached = await service.list_info(page_number, page_size)
    return cached["data"]


@router.get("/public/gdp-data", response_model=list[GdpResponse])
async def gdp_data(
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    year_start: Annotated[int, Query(alias="yearStart", ge=YEAR_MIN, le=YEAR_MAX)],
    year_end: Annotated[int, Query(alias="yearEnd", ge=YEAR_MIN, le=YEAR_MAX)],
):
    """Return Gdp rows for yearStart..yearEnd inclusive, ordered by year (cached for a day)."""
    cached = await service.gdp_range(year_start, year_end)
    return cached["data"]
