"""
Discount database access layer

Rows leave this module only as Discount models.
"""

import uuid
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone

from sqlalchemy import select, delete, and_, or_, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.discount import Discount, DiscountCreate
from app.models.database.discount_db import DiscountDB


class DiscountRepository:
    """Discount table queries"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def query_active_discounts_for_service(
        self,
        service_id: str,
        current_time: Optional[datetime] = None
    ) -> List[Discount]:
        """Active, non-expired discounts associated with the service.

        Storage-level pre-filter only; callers still run the full activity
        check. Newest discounts come first, ties broken by id.
        """
        if current_time is None:
            current_time = datetime.now(timezone.utc)

        query = select(DiscountDB).where(
            and_(
                DiscountDB.is_active.is_(True),
                or_(
                    DiscountDB.service_ids.contains([service_id]),
                    DiscountDB.service_id == service_id
                ),
                or_(
                    DiscountDB.expires_at.is_(None),
                    DiscountDB.expires_at > current_time
                )
            )
        ).order_by(desc(DiscountDB.created_at), DiscountDB.id)

        result = await self.db.execute(query)
        return [self.to_model(row) for row in result.scalars().all()]

    async def get_active_discounts(
        self,
        current_time: Optional[datetime] = None
    ) -> List[Discount]:
        """Discounts that are active, started and not expired, newest first"""
        if current_time is None:
            current_time = datetime.now(timezone.utc)

        query = select(DiscountDB).where(
            and_(
                DiscountDB.is_active.is_(True),
                or_(
                    DiscountDB.starts_at.is_(None),
                    DiscountDB.starts_at <= current_time
                ),
                or_(
                    DiscountDB.expires_at.is_(None),
                    DiscountDB.expires_at > current_time
                )
            )
        ).order_by(desc(DiscountDB.created_at), DiscountDB.id)

        result = await self.db.execute(query)
        return [self.to_model(row) for row in result.scalars().all()]

    async def get_by_id(self, discount_id: str) -> Optional[Discount]:
        db_discount = await self._get_row(discount_id)
        return self.to_model(db_discount) if db_discount else None

    async def get_by_code(self, code: str) -> Optional[Discount]:
        """Case-insensitive code lookup"""
        result = await self.db.execute(
            select(DiscountDB).where(func.upper(DiscountDB.code) == code.strip().upper())
        )
        db_discount = result.scalars().first()
        return self.to_model(db_discount) if db_discount else None

    async def create(self, data: DiscountCreate) -> Discount:
        db_discount = DiscountDB(
            id=str(uuid.uuid4()),
            name=data.name,
            code=data.code,
            description=data.description,
            discount_type=data.discount_type.value,
            discount_value=data.discount_value,
            scope_type=data.scope_type.value,
            service_id=data.service_id,
            service_ids=list(data.service_ids),
            brand_id=data.brand_id,
            series_id=data.series_id,
            model_id=data.model_id,
            is_active=data.is_active,
            starts_at=data.starts_at,
            expires_at=data.expires_at,
            max_uses=data.max_uses,
            current_uses=0,
            max_uses_per_user=data.max_uses_per_user
        )

        self.db.add(db_discount)
        await self.db.flush()
        await self.db.refresh(db_discount)
        return self.to_model(db_discount)

    async def update(self, discount_id: str, updates: Dict[str, Any]) -> Optional[Discount]:
        """Apply a partial update; None when the discount does not exist"""
        db_discount = await self._get_row(discount_id)
        if not db_discount:
            return None

        for field, value in updates.items():
            if hasattr(value, "value"):  # enums
                value = value.value
            setattr(db_discount, field, value)

        await self.db.flush()
        await self.db.refresh(db_discount)
        return self.to_model(db_discount)

    async def delete(self, discount_id: str) -> bool:
        result = await self.db.execute(
            delete(DiscountDB).where(DiscountDB.id == discount_id)
        )
        return result.rowcount > 0

    async def commit(self) -> None:
        """Commit the request session before caches are invalidated"""
        await self.db.commit()

    async def _get_row(self, discount_id: str) -> Optional[DiscountDB]:
        result = await self.db.execute(
            select(DiscountDB).where(DiscountDB.id == discount_id)
        )
        return result.scalar_one_or_none()

    def to_model(self, db_discount: DiscountDB) -> Discount:
        """Convert a row to the canonical Discount model"""
        return Discount(
            id=db_discount.id,
            name=db_discount.name,
            code=db_discount.code,
            description=db_discount.description,
            discount_type=db_discount.discount_type,
            discount_value=db_discount.discount_value,
            scope_type=db_discount.scope_type,
            service_id=db_discount.service_id,
            service_ids=db_discount.service_ids or [],
            brand_id=db_discount.brand_id,
            series_id=db_discount.series_id,
            model_id=db_discount.model_id,
            is_active=db_discount.is_active,
            starts_at=db_discount.starts_at,
            expires_at=db_discount.expires_at,
            max_uses=db_discount.max_uses,
            current_uses=db_discount.current_uses or 0,
            max_uses_per_user=db_discount.max_uses_per_user,
            created_at=db_discount.created_at,
            updated_at=db_discount.updated_at
        )
