import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from checkin_api.core.config import Settings

logger = logging.getLogger(__name__)


def _mask(url: str) -> str:
    return url.split("@")[-1] if "@" in url else url


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for DATABASE_URL.
    In-memory SQLite needs a single shared connection; everything else
    gets NullPool so cloud poolers manage connections.
    """
    url = settings.DATABASE_URL
    logger.info("Creating database engine for %s", _mask(url))
    if url.startswith("sqlite"):
        if ":memory:" in url or url.rstrip("/").endswith(":"):
            return create_async_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=False,
            )
        return create_async_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_async_engine(url, poolclass=NullPool, pool_pre_ping=True, echo=False)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def check_db_connection(session: AsyncSession) -> bool:
    """
    Simple database connection test that returns True/False without raising exceptions.
    Useful for health checks where you want to test connectivity without failing the endpoint.
    """
    try:
        await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database connection test failed: %s", e)
        return False


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides one session per request from the app's factory.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        yield session
