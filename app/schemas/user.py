"""User API schemas."""

from datetime import date

from app.application.dtos.user import UserResult
from app.domain.enums import RegistrationState
from app.schemas.common import CamelModel


class UserResponse(CamelModel):
    """User as returned by login and registration. The id card number is never echoed."""

    id: int
    wx_open_id: str | None = None
    mob: str | None = None
    name: str | None = None
    birthday: date | None = None
    state: RegistrationState

    @classmethod
    def from_result(cls, user: UserResult) -> "UserResponse":
        return cls(
            id=user.id,
            wx_open_id=user.wx_open_id,
            mob=user.mob,
            name=user.name,
            birthday=user.birthday,
            state=user.state,
        )
