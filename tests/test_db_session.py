"""
Tests for database engine, session and startup helpers.
"""
import pytest
from unittest.mock import AsyncMock, Mock
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool, StaticPool
from tenacity import wait_none
from checkin_api.core.config import Settings
from checkin_api.db.init_db import init_db
from checkin_api.db.session import _mask, build_engine, check_db_connection


def _settings(url: str) -> Settings:
    return Settings(_env_file=None, DATABASE_URL=url)


class TestBuildEngine:
    """Test build_engine pool selection."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["sqlite+aiosqlite://", "sqlite+aiosqlite:///:memory:"])
    async def test_memory_sqlite_uses_static_pool(self, url):
        """Test in-memory SQLite shares one connection."""
        engine = build_engine(_settings(url))
        try:
            assert isinstance(engine.pool, StaticPool)
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_postgres_uses_null_pool(self):
        """Test server databases leave pooling to the server side."""
        engine = build_engine(_settings("postgresql://u:p@localhost:5432/checkins"))
        try:
            assert isinstance(engine.pool, NullPool)
            assert engine.dialect.name == "postgresql"
            assert engine.dialect.driver == "asyncpg"
        finally:
            await engine.dispose()

    def test_mask_hides_credentials(self):
        """Test the logged URL drops user and password."""
        assert _mask("postgresql+asyncpg://u:secret@db:5432/x") == "db:5432/x"
        assert _mask("sqlite+aiosqlite://") == "sqlite+aiosqlite://"


class TestCheckDbConnection:
    """Test check_db_connection."""

    @pytest.mark.asyncio
    async def test_connected(self, db_session):
        """Test a live session reports True."""
        assert await check_db_connection(db_session) is True

    @pytest.mark.asyncio
    async def test_disconnected(self):
        """Test failures are reported as False rather than raised."""
        session = Mock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("refused")))

        assert await check_db_connection(session) is False


class TestInitDb:
    """Test init_db startup retry."""

    @pytest.mark.asyncio
    async def test_creates_tables(self, settings):
        """Test tables exist after init_db."""
        engine = build_engine(settings)
        try:
            await init_db(engine)
            async with engine.connect() as conn:
                names = await conn.run_sync(lambda c: inspect(c).get_table_names())
            assert "check_ins" in names
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_retries_operational_errors(self):
        """Test connection errors are retried then re-raised."""
        engine = Mock()
        engine.begin.side_effect = OperationalError("CONNECT", {}, Exception("refused"))

        with pytest.raises(OperationalError):
            await init_db.retry_with(wait=wait_none())(engine)

        assert engine.begin.call_count == 5
