"""
Catalog read access for the pricing engine
"""

from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalog import CatalogModel
from app.models.database.catalog_db import BrandDB, SeriesDB, DeviceModelDB


class CatalogRepository:
    """Read-only queries over brands, series and models"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_model_by_id(self, model_id: str) -> Optional[CatalogModel]:
        """Model identifiers needed for scope matching, or None if it does not exist"""
        result = await self.db.execute(
            select(
                DeviceModelDB.id,
                DeviceModelDB.brand_id,
                DeviceModelDB.series_id,
                DeviceModelDB.name
            ).where(DeviceModelDB.id == model_id)
        )
        row = result.one_or_none()
        if row is None:
            return None

        return CatalogModel(
            id=row.id,
            brand_id=row.brand_id,
            series_id=row.series_id,
            name=row.name
        )

    async def get_brand_names(self, brand_ids: List[str]) -> Dict[str, str]:
        if not brand_ids:
            return {}
        result = await self.db.execute(
            select(BrandDB.id, BrandDB.name).where(BrandDB.id.in_(brand_ids))
        )
        return {row.id: row.name for row in result.all()}

    async def get_series_names(self, series_ids: List[str]) -> Dict[str, str]:
        if not series_ids:
            return {}
        result = await self.db.execute(
            select(SeriesDB.id, SeriesDB.name).where(SeriesDB.id.in_(series_ids))
        )
        return {row.id: row.name for row in result.all()}

    async def get_model_names(self, model_ids: List[str]) -> Dict[str, str]:
        if not model_ids:
            return {}
        result = await self.db.execute(
            select(DeviceModelDB.id, DeviceModelDB.name).where(DeviceModelDB.id.in_(model_ids))
        )
        return {row.id: row.name for row in result.all()}
