import asyncio
import logging

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from checkin_api.core.config import get_settings
from checkin_api.db.models import Base
from checkin_api.db.session import build_engine

logger = logging.getLogger(__name__)


# Startup only: the database may still be coming up next to the API container
@retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, max=10),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def init_db(engine: AsyncEngine):
    """Initialize database tables"""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        raise


async def init_models():
    engine = build_engine(get_settings())
    try:
        await init_db(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_models())
