from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy import text
from typing import AsyncGenerator, Optional
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker] = None


async def init_database() -> None:
    """Create the global engine and session factory"""
    global engine, async_session_maker

    try:
        engine_options = {
            "echo": settings.debug,
            "pool_pre_ping": True,
        }
        if settings.is_testing:
            engine_options["poolclass"] = NullPool
        else:
            engine_options["pool_recycle"] = 3600

        engine = create_async_engine(settings.database_url_computed, **engine_options)

        async_session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        logger.info("Database engine initialized")

    except Exception as e:
        logger.error(f"Database engine initialization failed: {e}")
        raise


async def close_database() -> None:
    """Dispose of the global engine"""
    global engine

    if engine:
        await engine.dispose()
        logger.info("Database engine disposed")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session per request"""
    if not async_session_maker:
        raise RuntimeError("Database is not initialized, call init_database() first")

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class DatabaseService:
    """Connectivity checks for the health endpoints"""

    @property
    def engine(self):
        return engine

    async def health_check(self) -> dict:
        if not self.engine:
            return {"status": "error", "message": "database engine not initialized"}

        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                row = result.fetchone()
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {"status": "error", "message": f"database unreachable: {e}"}

        return {
            "status": "healthy",
            "message": "database connection ok",
            "test_query_result": row[0] if row else None
        }


database_service = DatabaseService()
