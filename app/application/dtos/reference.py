"""DTOs for reference datasets (Info listing, Gdp figures) and paging."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class InfoItem:
    id: int
    title: str
    content: str
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class GdpItem:
    id: int
    year: int
    value: float
    region: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "year": self.year,
            "value": self.value,
            "region": self.region,
        }


@dataclass(frozen=True)
class PagedData:
    """One page of a listing with pagination metadata."""

    page_number: int
    page_size: int
    total_count: int
    data: list[InfoItem]

    @property
    def total_page(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload (camelCase keys, as served and cached)."""
        return {
            "pageNumber": self.page_number,
            "pageSize": self.page_size,
            "totalCount": self.total_count,
            "totalPage": self.total_page,
            "data": [item.to_dict() for item in self.data],
        }
