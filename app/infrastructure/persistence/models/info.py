"""Info ORM model: public announcements served through the paged, cached listing."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin


class Info(IntIdMixin, TimestampMixin, Base):
    """Info model. Table: info."""

    __tablename__ = "info"

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
