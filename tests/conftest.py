"""
Pytest configuration and shared fixtures for all tests.
"""
import os

# Must be set before checkin_api.main builds its module-level app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from zoneinfo import ZoneInfo

import pytest
from fastapi import Depends
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from checkin_api.api.deps import get_checkin_service
from checkin_api.core.config import Settings
from checkin_api.db.init_db import init_db
from checkin_api.db.models import Base
from checkin_api.db.session import build_engine, build_session_factory, get_db
from checkin_api.main import create_app
from checkin_api.repositories.checkin_repo import CheckInRepository
from checkin_api.services.checkin import CheckInService


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FakeProvider:
    """Records suggest() calls; returns `result` or raises `error`."""

    def __init__(self):
        self.calls = []
        self.result = ["Take a short walk", "Drink a glass of water"]
        self.error = None

    async def suggest(self, mood: str, energy_level: int) -> list[str]:
        self.calls.append((mood, energy_level))
        if self.error is not None:
            raise self.error
        return list(self.result)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite://",
        OPENROUTER_API_KEY="test-key",
        REFERENCE_TIMEZONE="UTC",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def utc_tz() -> ZoneInfo:
    return ZoneInfo("UTC")


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 5, 10, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
async def test_engine(settings):
    """In-memory SQLite engine with the schema created."""
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for a test."""
    SessionLocal = build_session_factory(test_engine)
    async with SessionLocal() as session:
        yield session


@pytest.fixture
def repository(db_session) -> CheckInRepository:
    return CheckInRepository(db_session)


@pytest.fixture
def service(repository, fake_provider, utc_tz, clock) -> CheckInService:
    return CheckInService(repository, fake_provider, utc_tz, now=clock)


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    # ASGITransport does not run the lifespan, so create tables here
    await init_db(app.state.engine)
    yield app
    app.dependency_overrides.clear()
    await app.state.engine.dispose()


@pytest.fixture
async def client(app, fake_provider, clock) -> AsyncGenerator[AsyncClient, None]:
    """Test client whose service uses the fake provider and frozen clock."""

    async def override_service(db: AsyncSession = Depends(get_db)):
        return CheckInService(CheckInRepository(db), fake_provider, ZoneInfo("UTC"), now=clock)

    app.dependency_overrides[get_checkin_service] = override_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_completion_response():
    """Completions-endpoint payload with commentary around the array."""
    return {
        "id": "gen-test123",
        "object": "text_completion",
        "model": "meta-llama/llama-4-maverick:free",
        "choices": [
            {
                "text": 'Sure! ["Take a walk", "Hydrate", "Call a friend", "Stretch", "Sleep early"] Enjoy.',
                "index": 0,
                "finish_reason": "stop",
            }
        ],
    }
