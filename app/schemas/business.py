"""Public reference data schemas (Info listing, Gdp figures)."""

from datetime import datetime

from app.schemas.common import CamelModel


class InfoResponse(CamelModel):
    id: int
    title: str
    content: str
    created_at: datetime | None = None


class InfoPage(CamelModel):
    """One page of Info with paging metadata."""

    page_number: int
    page_size: int
    total_count: int
    total_page: int
    data: list[InfoResponse]


class GdpResponse(CamelModel):
    id: int
    year: int
    value: float
    region: str | None = None
