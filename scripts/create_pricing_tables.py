"""
Pricing database setup script

python scripts/create_pricing_tables.py [--with-samples]
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy import text
from app.core.config import settings
from app.core.database import Base

# registers every table on Base.metadata
from app.models.database.catalog_db import BrandDB, SeriesDB, DeviceModelDB, ServiceDB
from app.models.database.discount_db import DiscountDB


async def create_database_if_not_exists():
    server_url = settings.database_url_computed.replace(f"/{settings.db_name}", "/postgres")

    engine = create_async_engine(server_url, isolation_level="AUTOCOMMIT")

    async with engine.connect() as conn:
        result = await conn.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
            {"db_name": settings.db_name}
        )

        if not result.fetchone():
            await conn.execute(text(f'CREATE DATABASE "{settings.db_name}"'))
            print(f"Database '{settings.db_name}' created")
        else:
            print(f"Database '{settings.db_name}' already exists")

    await engine.dispose()


async def create_tables():
    engine = create_async_engine(settings.database_url_computed)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        print("All tables created")

    await engine.dispose()


async def create_indexes():
    engine = create_async_engine(settings.database_url_computed)

    indexes = [
        # candidate lookup: active discounts containing a service id
        "CREATE INDEX IF NOT EXISTS idx_discounts_service_ids ON discounts USING GIN (service_ids);",
        "CREATE INDEX IF NOT EXISTS idx_discounts_active_validity ON discounts(is_active, starts_at, expires_at);",
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_discounts_code_upper ON discounts(UPPER(code));",

        "CREATE INDEX IF NOT EXISTS idx_models_brand_series ON models(brand_id, series_id);",
    ]

    async with engine.begin() as conn:
        for index_sql in indexes:
            await conn.execute(text(index_sql))
        print("All indexes created")

    await engine.dispose()


async def insert_samples():
    """Small catalog and two discounts for local development"""
    engine = create_async_engine(settings.database_url_computed)
    now = datetime.now(timezone.utc)

    catalog = [
        ("INSERT INTO brands (id, name, slug) VALUES (:id, :name, :slug) ON CONFLICT (id) DO NOTHING",
         {"id": "apple", "name": "Apple", "slug": "apple"}),
        ("INSERT INTO series (id, brand_id, name, slug) VALUES (:id, :brand_id, :name, :slug) ON CONFLICT (id) DO NOTHING",
         {"id": "iphone-15", "brand_id": "apple", "name": "iPhone 15", "slug": "iphone-15"}),
        ("INSERT INTO models (id, brand_id, series_id, name, slug) VALUES (:id, :brand_id, :series_id, :name, :slug) ON CONFLICT (id) DO NOTHING",
         {"id": "iphone-15-pro", "brand_id": "apple", "series_id": "iphone-15", "name": "iPhone 15 Pro", "slug": "iphone-15-pro"}),
        ("INSERT INTO services (id, slug) VALUES (:id, :slug) ON CONFLICT (id) DO NOTHING",
         {"id": "screen-replacement", "slug": "screen-replacement"}),
        ("INSERT INTO services (id, slug) VALUES (:id, :slug) ON CONFLICT (id) DO NOTHING",
         {"id": "battery-replacement", "slug": "battery-replacement"}),
    ]

    discounts = [
        {
            "id": "sample-apple-screen",
            "name": "Apple screen week",
            "code": "APPLESCREEN20",
            "discount_type": "percentage",
            "discount_value": 20,
            "scope_type": "brand",
            "service_ids": ["screen-replacement"],
            "brand_id": "apple",
            "starts_at": now,
            "expires_at": now + timedelta(days=7),
        },
        {
            "id": "sample-battery-fixed",
            "name": "Battery 500 off",
            "code": "BATTERY500",
            "discount_type": "fixed",
            "discount_value": 500,
            "scope_type": "all_models",
            "service_ids": ["battery-replacement"],
            "brand_id": None,
            "starts_at": None,
            "expires_at": None,
        },
    ]

    async with engine.begin() as conn:
        for sql, params in catalog:
            await conn.execute(text(sql), params)

        for discount in discounts:
            await conn.execute(
                text("""
                    INSERT INTO discounts (
                        id, name, code, discount_type, discount_value, scope_type,
                        service_ids, brand_id, is_active, starts_at, expires_at, current_uses
                    ) VALUES (
                        :id, :name, :code, :discount_type, :discount_value, :scope_type,
                        :service_ids, :brand_id, true, :starts_at, :expires_at, 0
                    ) ON CONFLICT (id) DO NOTHING
                """),
                discount
            )
            print(f"Sample discount: {discount['code']}")

    await engine.dispose()


async def main(with_samples: bool = False):
    print("Setting up pricing database...")

    await create_database_if_not_exists()
    await create_tables()
    await create_indexes()

    if with_samples:
        await insert_samples()

    print("Pricing database ready")


if __name__ == "__main__":
    asyncio.run(main(with_samples="--with-samples" in sys.argv))
