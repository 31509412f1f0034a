"""User repository: lookup-or-create by WeChat openid, phone binding, registration."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.domain.exceptions import PhoneAlreadyBoundException
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.sanitization import mask_identifier

logger = logging.getLogger(__name__)


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult."""
    return UserResult(
        id=u.id,
        wx_open_id=u.wx_open_id,
        mob=u.mob,
        name=u.name,
        id_card_number=u.id_card_number,
        birthday=u.birthday,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Unique constraints on wx_open_id and mob back the service rules."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: int) -> UserResult | None:
        user = await self._get(user_id)
        return _user_to_result(user) if user else None

    async def get_by_open_id(self, open_id: str) -> UserResult | None:
        result = await self.db.execute(select(User).where(User.wx_open_id == open_id))
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def get_or_create_by_open_id(self, open_id: str) -> tuple[UserResult, bool]:
        """Return the user for open_id, inserting an identity-only row if absent.

        The insert runs in a SAVEPOINT; if a concurrent request inserted the
        same openid first, the unique constraint rejects ours and we re-read
        the winner's row instead of failing the request.
        """
        existing = await self.get_by_open_id(open_id)
        if existing is not None:
            return existing, False
        try:
            async with self.db.begin_nested():
                created = await self._create(User(wx_open_id=open_id))
            logger.info(
                "Created user %s for openid %s", created.id, mask_identifier(open_id)
            )
            return _user_to_result(created), True
        except IntegrityError:
            logger.info(
                "Concurrent first login for openid %s; re-reading",
                mask_identifier(open_id),
            )
        winner = await self.get_by_open_id(open_id)
        if winner is None:
            raise RuntimeError("User insert conflicted but no row found on re-read")
        return winner, False

    async def is_mob_bound_to_other(self, mob: str, user_id: int) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(User)
            .where(User.mob == mob, User.id != user_id)
        )
        return (result.scalar_one() or 0) > 0

    async def bind_mob(self, user_id: int, mob: str) -> bool:
        """Set mob on the user; raise PhoneAlreadyBoundException on unique violation."""
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(
                    update(User).where(User.id == user_id).values(mob=mob)
                )
        except IntegrityError:
            raise PhoneAlreadyBoundException() from None
        return result.rowcount > 0

    async def complete_registration(
        self,
        user_id: int,
        mob: str,
        name: str,
        id_card_number: str,
        birthday: date,
    ) -> int:
        """Set profile fields where the stored mob still equals mob. Returns rows affected."""
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id, User.mob == mob)
            .values(name=name, id_card_number=id_card_number, birthday=birthday)
        )
        return result.rowcount
