"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.reference import GdpItem, InfoItem
    from app.application.dtos.user import UserResult


class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_by_id(self, user_id: int) -> UserResult | None:
        """Return user by internal id."""

    async def get_or_create_by_open_id(self, open_id: str) -> tuple[UserResult, bool]:
        """Return the user bound to open_id, creating it if absent. Second item is True when created."""

    async def is_mob_bound_to_other(self, mob: str, user_id: int) -> bool:
        """Return True if a user other than user_id has mob bound."""

    async def bind_mob(self, user_id: int, mob: str) -> bool:
        """Set mob on the user. Returns False if the user does not exist."""

    async def complete_registration(
        self,
        user_id: int,
        mob: str,
        name: str,
        id_card_number: str,
        birthday: date,
    ) -> int:
        """Set profile fields where id and mob match. Returns affected row count."""


class IInfoRepository(Protocol):
    """Protocol for the Info listing (DIP)."""

    async def get_page(
        self, page_number: int, page_size: int
    ) -> tuple[list[InfoItem], int]:
        """Return (items on the page, total count)."""


class IGdpRepository(Protocol):
    """Protocol for Gdp figures (DIP)."""

    async def get_range(self, year_start: int, year_end: int) -> list[GdpItem]:
        """Return records with year_start <= year <= year_end ordered by year."""
