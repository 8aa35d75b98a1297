from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import settings
from app.core.redis import redis_manager
from app.core.database import init_database, close_database
from app.api.health import router as health_router
from app.api.pricing import router as pricing_router
from app.api.discounts import router as discounts_router
from app.api.exceptions import (
    validation_exception_handler,
    http_exception_handler,
    database_exception_handler,
    general_exception_handler,
    business_exception_handler,
    BusinessException
)

import logging

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open and close shared connections"""
    logger.info("Starting pricing service")

    await init_database()

    try:
        await redis_manager.init_redis()
    except Exception as e:
        # admin listings fall back to uncached reads
        logger.warning(f"Redis unavailable, admin cache disabled: {e}")

    logger.info("Startup complete")

    yield

    logger.info("Shutting down")
    await close_database()
    await redis_manager.close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Discount resolution and pricing for the repair storefront",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(pricing_router)
app.include_router(discounts_router)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)
app.add_exception_handler(BusinessException, business_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
