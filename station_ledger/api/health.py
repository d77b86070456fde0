"""
Liveness and database connectivity probe.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from station_ledger.logging_config import get_logger
from station_ledger.models.base import get_db

router = APIRouter(tags=["Health"])

logger = get_logger("health")


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Return application health status including database connectivity.

    A failing database check is reported as "degraded" rather
    than an error, so the load balancer can take this instance
    out of rotation.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "station-ledger",
        "database": db_status,
    }
