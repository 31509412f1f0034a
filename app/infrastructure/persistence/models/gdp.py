"""Gdp ORM model: yearly GDP figures (near-static reference data)."""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntIdMixin


class Gdp(IntIdMixin, Base):
    """Gdp model. Table: gdp. Indexed by year for range queries."""

    __tablename__ = "gdp"

    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    region: Mapped[str | None] = mapped_column(String(64), nullable=True)
