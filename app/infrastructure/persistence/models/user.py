"""User ORM model: WeChat-bound identity with phone and profile."""

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin


class User(IntIdMixin, TimestampMixin, Base):
    """User model. Table: app_user. wx_open_id and mob are each unique when set."""

    __tablename__ = "app_user"

    wx_open_id: Mapped[str | None] = mapped_column(
        String(128), nullable=True, unique=True, index=True
    )
    mob: Mapped[str | None] = mapped_column(
        String(20), nullable=True, unique=True, index=True
    )
    name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    id_card_number: Mapped[str | None] = mapped_column(String(18), nullable=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
