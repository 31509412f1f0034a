"""User, Info and Gdp repository integration tests. Require Postgres (migrated schema).

Most tests use the rolled-back db_session; the concurrent first-login test
commits through two independent sessions and deletes its row afterwards.
"""

import asyncio
import uuid
from datetime import date

import pytest
from sqlalchemy import delete

from app.domain.exceptions import PhoneAlreadyBoundException
from app.infrastructure.persistence import database
from app.infrastructure.persistence.models import Gdp, Info, User
from app.infrastructure.persistence.repositories import (
    GdpRepository,
    InfoRepository,
    UserRepository,
)


def _openid() -> str:
    return f"o-test-{uuid.uuid4().hex[:16]}"


def _mob() -> str:
    return f"139{uuid.uuid4().int % 10**8:08d}"


@pytest.mark.requires_db
async def test_get_or_create_by_open_id(db_session) -> None:
    repo = UserRepository(db_session)
    open_id = _openid()
    created, was_created = await repo.get_or_create_by_open_id(open_id)
    again, created_again = await repo.get_or_create_by_open_id(open_id)
    assert was_created is True
    assert created_again is False
    assert again.id == created.id
    assert created.mob is None


@pytest.mark.requires_db
async def test_bind_mob_and_conflict(db_session) -> None:
    repo = UserRepository(db_session)
    mob = _mob()
    first, _ = await repo.get_or_create_by_open_id(_openid())
    second, _ = await repo.get_or_create_by_open_id(_openid())

    assert await repo.bind_mob(first.id, mob) is True
    assert await repo.bind_mob(first.id, mob) is True
    assert await repo.is_mob_bound_to_other(mob, second.id) is True
    assert await repo.is_mob_bound_to_other(mob, first.id) is False

    with pytest.raises(PhoneAlreadyBoundException):
        await repo.bind_mob(second.id, mob)
    # SAVEPOINT rollback keeps the outer transaction usable
    assert (await repo.get_by_id(second.id)).mob is None


@pytest.mark.requires_db
async def test_bind_mob_unknown_user(db_session) -> None:
    assert await UserRepository(db_session).bind_mob(2_000_000_000, _mob()) is False


@pytest.mark.requires_db
async def test_complete_registration_requires_matching_mob(db_session) -> None:
    repo = UserRepository(db_session)
    mob = _mob()
    user, _ = await repo.get_or_create_by_open_id(_openid())
    assert (
        await repo.complete_registration(user.id, mob, "A", "110105194912310021", date(1949, 12, 31))
        == 0
    )
    await repo.bind_mob(user.id, mob)
    assert (
        await repo.complete_registration(user.id, mob, "A", "110105194912310021", date(1949, 12, 31))
        == 1
    )
    stored = await repo.get_by_id(user.id)
    assert stored.name == "A"
    assert stored.birthday == date(1949, 12, 31)


@pytest.mark.requires_db
async def test_info_page_and_gdp_range(db_session) -> None:
    db_session.add_all([Info(title=f"t{i}", content="c") for i in range(3)])
    db_session.add_all(
        [Gdp(year=y, value=float(y)) for y in (1901, 1902, 1903, 1905)]
    )
    await db_session.flush()

    items, total = await InfoRepository(db_session).get_page(1, 2)
    assert total >= 3
    assert len(items) == 2
    assert items[0].id < items[1].id

    rows = await GdpRepository(db_session).get_range(1902, 1905)
    years = [r.year for r in rows]
    assert years == sorted(years)
    assert {1902, 1903, 1905} <= set(years)
    assert 1901 not in years


@pytest.mark.requires_db
async def test_concurrent_first_login_creates_one_user(db_session) -> None:
    open_id = _openid()

    async def login() -> int:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                user, _ = await UserRepository(session).get_or_create_by_open_id(open_id)
                return user.id

    try:
        ids = await asyncio.gather(login(), login(), login())
        assert len(set(ids)) == 1
    finally:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                await session.execute(delete(User).where(User.wx_open_id == open_id))
