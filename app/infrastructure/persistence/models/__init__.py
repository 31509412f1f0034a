"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.gdp import Gdp
from app.infrastructure.persistence.models.info import Info
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin
from app.infrastructure.persistence.models.user import User

__all__ = [
    "Gdp",
    "Info",
    "IntIdMixin",
    "TimestampMixin",
    "User",
]
