"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import date

from app.domain.enums import RegistrationState


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of lookups, creation and updates)."""

    id: int
    wx_open_id: str | None
    mob: str | None = None
    name: str | None = None
    id_card_number: str | None = None
    birthday: date | None = None

    @property
    def state(self) -> RegistrationState:
        """Registration state derived from which fields are bound."""
        if not self.mob:
            return RegistrationState.THIRD_PARTY_VERIFIED
        if self.name and self.id_card_number and self.birthday:
            return RegistrationState.REGISTERED
        return RegistrationState.PHONE_VERIFIED
