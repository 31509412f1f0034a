"""Pytest configuration and fixtures for wechat-identity.

HTTP tests run app.main:app through httpx ASGITransport with the database,
cache and SMS provider replaced by in-memory fakes (dependency_overrides).
Repository tests use a real Postgres session and are marked requires_db.
"""

import os

# Settings are validated when app.main is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-0123456789")
os.environ.setdefault("REDIS_ENABLED", "false")

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dependencies import (
    get_cache,
    get_query_cache,
    get_reference_data_service,
    get_sms_sender,
    get_user_repo,
    get_user_repo_for_write,
    get_wechat_client,
)
from app.application.dtos.reference import GdpItem, InfoItem
from app.application.dtos.user import UserResult
from app.application.services.cached_query_service import CachedQueryService
from app.application.use_cases.reference_data import ReferenceDataService
from app.core.config import Settings, get_settings
from app.core.limiter import limiter
from app.domain.exceptions import PhoneAlreadyBoundException
from app.infrastructure.persistence import database
from app.infrastructure.security.jwt import TokenIssuer
from app.main import app


class FakeClock:
    """Controllable UTC clock for TTL behaviour."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 8, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeCache:
    """In-memory ICacheService with per-key expiry on a FakeClock."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.entries: dict[str, tuple[Any, datetime]] = {}
        self.available = True
        self.fail_writes = False
        self.set_calls: list[tuple[str, int]] = []

    def is_available(self) -> bool:
        return self.available

    async def get(self, key: str) -> Any:
        if not self.available:
            return None
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self.entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        if ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")
        self.set_calls.append((key, ttl))
        if not self.available or self.fail_writes:
            return False
        self.entries[key] = (value, self.clock() + timedelta(seconds=ttl))
        return True


class FakeUserRepository:
    """In-memory IUserRepository with the same uniqueness rules as the table."""

    def __init__(self) -> None:
        self.users: dict[int, UserResult] = {}
        self._next_id = 1

    def add(self, **fields: Any) -> UserResult:
        user = UserResult(id=self._next_id, **fields)
        self.users[user.id] = user
        self._next_id += 1
        return user

    async def get_by_id(self, user_id: int) -> UserResult | None:
        return self.users.get(user_id)

    async def get_or_create_by_open_id(self, open_id: str) -> tuple[UserResult, bool]:
        for user in self.users.values():
            if user.wx_open_id == open_id:
                return user, False
        return self.add(wx_open_id=open_id), True

    async def is_mob_bound_to_other(self, mob: str, user_id: int) -> bool:
        return any(u.mob == mob and u.id != user_id for u in self.users.values())

    async def bind_mob(self, user_id: int, mob: str) -> bool:
        if await self.is_mob_bound_to_other(mob, user_id):
            raise PhoneAlreadyBoundException()
        user = self.users.get(user_id)
        if user is None:
            return False
        self.users[user_id] = replace(user, mob=mob)
        return True

    async def complete_registration(
        self,
        user_id: int,
        mob: str,
        name: str,
        id_card_number: str,
        birthday: date,
    ) -> int:
        user = self.users.get(user_id)
        if user is None or user.mob != mob:
            return 0
        self.users[user_id] = replace(
            user, name=name, id_card_number=id_card_number, birthday=birthday
        )
        return 1


class RecordingSmsSender:
    """ISmsSender that records messages and returns a configurable result."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, list[str]]] = []
        self.result = True
        self.error: Exception | None = None

    async def send_code(self, mob: str, template_params: list[str]) -> bool:
        if self.error is not None:
            raise self.error
        self.sent.append((mob, list(template_params)))
        return self.result

    @property
    def last_code(self) -> str:
        return self.sent[-1][1][0]


class FakeInfoRepository:
    def __init__(self, items: list[InfoItem]) -> None:
        self.items = items
        self.calls = 0

    async def get_page(
        self, page_number: int, page_size: int
    ) -> tuple[list[InfoItem], int]:
        self.calls += 1
        start = (page_number - 1) * page_size
        return self.items[start : start + page_size], len(self.items)


class FakeGdpRepository:
    def __init__(self, items: list[GdpItem]) -> None:
        self.items = items
        self.calls = 0

    async def get_range(self, year_start: int, year_end: int) -> list[GdpItem]:
        self.calls += 1
        return sorted(
            (i for i in self.items if year_start <= i.year <= year_end),
            key=lambda i: i.year,
        )


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    """Rate limits are per process; start every test with empty windows."""
    limiter.reset()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> FakeCache:
    return FakeCache(clock)


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture
def token_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(settings)


@pytest.fixture
def info_repo() -> FakeInfoRepository:
    return FakeInfoRepository(
        [
            InfoItem(
                id=i,
                title=f"Notice {i}",
                content=f"Body {i}",
                created_at=datetime(2026, 1, i, tzinfo=UTC),
            )
            for i in range(1, 26)
        ]
    )


@pytest.fixture
def gdp_repo() -> FakeGdpRepository:
    return FakeGdpRepository(
        [GdpItem(id=i, year=1999 + i, value=1000.0 + i * 10) for i in range(1, 21)]
    )


@pytest.fixture
def query_cache(cache: FakeCache) -> CachedQueryService:
    return CachedQueryService(cache)


@pytest.fixture
def reference_service(
    info_repo: FakeInfoRepository,
    gdp_repo: FakeGdpRepository,
    query_cache: CachedQueryService,
) -> ReferenceDataService:
    return ReferenceDataService(
        info_repo, gdp_repo, query_cache, volatile_ttl=600, stable_ttl=86_400
    )


@pytest.fixture
def auth_headers(token_issuer: TokenIssuer) -> Callable[[int], dict[str, str]]:
    """Return a factory: Authorization header for a given user id."""

    def make(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_issuer.issue_token(user_id)}"}

    return make


@pytest.fixture
async def client(
    cache: FakeCache,
    user_repo: FakeUserRepository,
    sms_sender: RecordingSmsSender,
    query_cache: CachedQueryService,
    reference_service: ReferenceDataService,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with in-memory collaborators."""
    app.dependency_overrides.update(
        {
            get_cache: lambda: cache,
            get_query_cache: lambda: query_cache,
            get_user_repo: lambda: user_repo,
            get_user_repo_for_write: lambda: user_repo,
            get_sms_sender: lambda: sms_sender,
            get_wechat_client: lambda: None,
            get_reference_data_service: lambda: reference_service,
        }
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL pointing at a migrated Postgres. Skips (pytest.skip)
    when it is not configured. Use @pytest.mark.requires_db to mark tests that
    need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database.get_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    try:
        async with database.AsyncSessionLocal() as session:
            yield session
            await session.rollback()
    finally:
        # Pooled asyncpg connections are bound to this test's event loop.
        await database.dispose_engine()
