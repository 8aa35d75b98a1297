"""
Shared pytest fixtures
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.core.database import Base
from app.models.catalog import CatalogModel
from app.models.discount import Discount, DiscountScopeType, DiscountType

# registers every table on Base.metadata
from app.models.database import BrandDB, SeriesDB, DeviceModelDB, ServiceDB, DiscountDB  # noqa: F401


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """Engine on the <db_name>_test PostgreSQL database, tables created per test"""
    from app.core.config import settings

    test_db_url = settings.database_url_computed.replace(
        settings.db_name,
        f"{settings.db_name}_test"
    )

    engine = create_async_engine(test_db_url, echo=False, pool_pre_ping=True)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        await engine.dispose()
        pytest.skip("PostgreSQL test database not available")

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_db_engine) -> AsyncSession:
    session_maker = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def make_discount(now):
    """Factory for Discount models with sensible defaults"""

    def _make(**overrides) -> Discount:
        data = {
            "id": str(uuid.uuid4()),
            "name": "Spring repair week",
            "code": f"SPRING{uuid.uuid4().hex[:6].upper()}",
            "discount_type": DiscountType.PERCENTAGE,
            "discount_value": Decimal("20"),
            "scope_type": DiscountScopeType.ALL_MODELS,
            "service_ids": ["screen-replacement"],
            "is_active": True,
            "starts_at": now - timedelta(days=1),
            "expires_at": now + timedelta(days=30),
            "current_uses": 0,
            "created_at": now - timedelta(days=2),
        }
        data.update(overrides)
        return Discount(**data)

    return _make


@pytest.fixture
def iphone_model():
    return CatalogModel(
        id="iphone-15-pro",
        brand_id="apple",
        series_id="iphone-15",
        name="iPhone 15 Pro"
    )


@pytest.fixture
def galaxy_model():
    return CatalogModel(
        id="galaxy-s24",
        brand_id="samsung",
        series_id="galaxy-s",
        name="Galaxy S24"
    )
