from fastapi import APIRouter
from fastapi.responses import JSONResponse
import logging

from app.core.config import settings
from app.core.redis import redis_manager
from app.core.database import database_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """Liveness"""
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment
    }


@router.get("/database")
async def database_health():
    """PostgreSQL and Redis connectivity"""
    health_status = {
        "postgresql": False,
        "redis": False,
        "overall": False,
        "details": {}
    }

    pg_status = await database_service.health_check()
    health_status["postgresql"] = pg_status["status"] == "healthy"
    health_status["details"]["postgresql"] = pg_status["message"]

    if await redis_manager.ping():
        health_status["redis"] = True
        health_status["details"]["redis"] = "connection ok"
    else:
        health_status["details"]["redis"] = "unavailable"

    # pricing only needs PostgreSQL; redis backs the admin cache
    health_status["overall"] = health_status["postgresql"]

    if not health_status["overall"]:
        logger.warning("Database health check failed", extra={"details": health_status["details"]})
        return JSONResponse(status_code=503, content=health_status)

    return health_status
