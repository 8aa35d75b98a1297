"""
Discount management service
Back-office operations on discounts, with cached listings
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.exceptions import DiscountNotFoundError, DuplicateDiscountCodeError, InvalidDiscountError
from app.models.discount import (
    ApplicableDiscount,
    Discount,
    DiscountCreate,
    DiscountScopeType,
    DiscountUpdate,
    check_discount_rule
)
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.discount_repository import DiscountRepository
from app.services.common_cache import discount_cache
from app.services.discount_calculator import (
    describe_discount_scope,
    format_discount_value,
    is_discount_active,
    matches_scope,
    service_covered,
    utcnow
)

logger = logging.getLogger(__name__)

ALL_MODELS_LABEL = "All models"
ALL_SERVICES_LABEL = "All services"

ACTIVE_KEY = "active:all"
CACHE_KEY_PATTERNS = ("active:*", "code:*")


class DiscountService:
    """Discount CRUD for the admin screens

    Writes commit before the cache is cleared, so a concurrent read cannot
    put pre-write rows back into the cache.
    """

    def __init__(self, discount_repo: DiscountRepository, catalog_repo: CatalogRepository):
        self.discount_repo = discount_repo
        self.catalog_repo = catalog_repo
        self.cache = discount_cache
        self.cache_ttl = settings.discount_cache_ttl

    async def get_active_discounts(self, use_cache: bool = True) -> List[Discount]:
        if use_cache:
            cached = await self.cache.get(ACTIVE_KEY)
            if cached is not None:
                return [Discount(**item) for item in cached]

        discounts = await self.discount_repo.get_active_discounts()

        if use_cache:
            await self.cache.set(
                ACTIVE_KEY,
                [discount.model_dump(mode="json") for discount in discounts],
                ttl=self.cache_ttl
            )

        return discounts

    async def find_discount_by_code(self, code: str, use_cache: bool = True) -> Optional[Discount]:
        """Case-insensitive lookup by redemption code"""
        cache_key = f"code:{code.strip().upper()}"

        if use_cache:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return Discount(**cached)

        discount = await self.discount_repo.get_by_code(code)
        if discount is None:
            return None

        if use_cache:
            await self.cache.set(cache_key, discount.model_dump(mode="json"), ttl=self.cache_ttl)

        return discount

    async def find_applicable_discounts(self, service_id: str, model_id: str) -> List[ApplicableDiscount]:
        """Every usable discount covering the pair, labelled for display"""
        model = await self.catalog_repo.get_model_by_id(model_id)
        if model is None:
            return []

        now = utcnow()
        candidates = await self.discount_repo.query_active_discounts_for_service(service_id, current_time=now)
        applicable = [
            discount for discount in candidates
            if is_discount_active(discount, now)
            and service_covered(discount, service_id)
            and matches_scope(discount, model)
        ]

        brand_names = await self.catalog_repo.get_brand_names(
            [d.brand_id for d in applicable if d.scope_type == DiscountScopeType.BRAND]
        )
        series_names = await self.catalog_repo.get_series_names(
            [d.series_id for d in applicable if d.scope_type == DiscountScopeType.SERIES]
        )
        model_names = await self.catalog_repo.get_model_names(
            [d.model_id for d in applicable if d.scope_type == DiscountScopeType.MODEL]
        )

        return [
            ApplicableDiscount(
                discount=discount,
                applicable_to=self._applicable_to_label(discount, brand_names, series_names, model_names),
                display_value=format_discount_value(discount),
                scope_description=describe_discount_scope(discount)
            )
            for discount in applicable
        ]

    async def create_discount(self, data: DiscountCreate) -> Discount:
        if await self.discount_repo.get_by_code(data.code):
            raise DuplicateDiscountCodeError(data.code)

        try:
            discount = await self.discount_repo.create(data)
        except IntegrityError:
            # a concurrent create took the code between the check and the insert
            raise DuplicateDiscountCodeError(data.code)

        await self.discount_repo.commit()
        logger.info(f"Discount created: {discount.id} ({discount.code})")

        await self._clear_discount_caches()
        return discount

    async def update_discount(self, discount_id: str, data: DiscountUpdate) -> Discount:
        updates = data.model_dump(exclude_unset=True)

        existing = await self.discount_repo.get_by_id(discount_id)
        if existing is None:
            raise DiscountNotFoundError(discount_id)

        merged = existing.model_copy(update=updates)
        try:
            check_discount_rule(merged.discount_type, merged.discount_value, merged.starts_at, merged.expires_at)
        except ValueError as e:
            raise InvalidDiscountError(str(e))

        discount = await self.discount_repo.update(discount_id, updates)
        if discount is None:
            raise DiscountNotFoundError(discount_id)

        await self.discount_repo.commit()
        logger.info(f"Discount updated: {discount_id} fields={sorted(updates)}")

        await self._clear_discount_caches()
        return discount

    async def delete_discount(self, discount_id: str) -> None:
        deleted = await self.discount_repo.delete(discount_id)
        if not deleted:
            raise DiscountNotFoundError(discount_id)

        await self.discount_repo.commit()
        logger.info(f"Discount deleted: {discount_id}")
        await self._clear_discount_caches()

    def _applicable_to_label(self, discount: Discount, brand_names, series_names, model_names) -> str:
        scope = discount.scope_type
        if scope == DiscountScopeType.ALL_MODELS:
            return ALL_MODELS_LABEL
        if scope == DiscountScopeType.ALL_SERVICES:
            return ALL_SERVICES_LABEL
        if scope == DiscountScopeType.BRAND:
            return brand_names.get(discount.brand_id, "N/A")
        if scope == DiscountScopeType.SERIES:
            return series_names.get(discount.series_id, "N/A")
        if scope == DiscountScopeType.MODEL:
            return model_names.get(discount.model_id, "N/A")
        return "N/A"

    async def _clear_discount_caches(self):
        for pattern in CACHE_KEY_PATTERNS:
            await self.cache.delete_pattern(pattern)
