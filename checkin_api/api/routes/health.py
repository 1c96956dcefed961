'''
Health checks: a static liveness probe and one that also pings the database.
'''
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from checkin_api.db.session import check_db_connection, get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE_NAME = "daily-checkin-api"


@router.get("/health")
async def health():
    """
    Simple health check endpoint for deployment checks.
    Does not require database connectivity.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "API is running",
        "service": SERVICE_NAME,
    }


@router.get("/health/full")
async def health_full(db: AsyncSession = Depends(get_db)):
    """
    Verifies both API and database connectivity.
    """
    connected = await check_db_connection(db)
    if connected:
        logger.info("Database health check successful")
    return {
        "status": "healthy" if connected else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if connected else "disconnected",
        "service": SERVICE_NAME,
    }
