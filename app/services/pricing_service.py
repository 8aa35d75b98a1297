"""
Storefront pricing service
Resolves which discount, if any, applies to a (service, model) pair and
returns the price to display
"""

import logging
from typing import Optional

from app.core.config import DiscountSelectionPolicy
from app.core.exceptions import InvalidPriceError
from app.models.discount import Discount, PriceWithDiscount
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.discount_repository import DiscountRepository
from app.services.discount_calculator import (
    Number,
    calculate_discount,
    is_discount_active,
    matches_scope,
    select_discount,
    service_covered,
    to_decimal,
    utcnow
)

logger = logging.getLogger(__name__)


class PricingService:
    """Discount lookup and price calculation for the storefront

    Read-only and uncached: a discount that is switched off or expires is
    reflected on the very next call. Data-access errors propagate to the
    caller unchanged.
    """

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        discount_repo: DiscountRepository,
        selection_policy: Optional[DiscountSelectionPolicy] = None
    ):
        self.catalog_repo = catalog_repo
        self.discount_repo = discount_repo
        self.selection_policy = selection_policy

    async def get_applicable_discounts(self, service_id: str, model_id: str) -> Optional[Discount]:
        """The winning discount for the pair, or None when nothing applies"""
        model = await self.catalog_repo.get_model_by_id(model_id)
        if model is None:
            logger.debug(f"Model {model_id} not found, no discount")
            return None

        now = utcnow()
        candidates = await self.discount_repo.query_active_discounts_for_service(service_id, current_time=now)
        logger.debug(f"Found {len(candidates)} discount candidates for service {service_id}")

        if not candidates:
            return None

        applicable = []
        for discount in candidates:
            if not is_discount_active(discount, now):
                logger.debug(f"Discount {discount.id} is not active")
                continue
            if not service_covered(discount, service_id):
                logger.debug(f"Service {service_id} not covered by discount {discount.id}")
                continue
            if not matches_scope(discount, model):
                logger.debug(f"Discount {discount.id} scope {discount.scope_type.value} does not cover model {model.id}")
                continue
            applicable.append(discount)

        selected = select_discount(applicable, self.selection_policy)
        if selected is None:
            logger.debug(f"No discount applies to service {service_id} on model {model_id}")
            return None

        logger.debug(f"Selected discount {selected.id} ({selected.code}) of {len(applicable)} applicable")
        return selected

    async def get_price_with_discount(
        self,
        service_id: str,
        model_id: str,
        original_price: Number
    ) -> PriceWithDiscount:
        """Price to display for a service on a model"""
        original_price = to_decimal(original_price)
        if original_price < 0:
            raise InvalidPriceError(original_price)

        discount = await self.get_applicable_discounts(service_id, model_id)
        if discount is None:
            return PriceWithDiscount(
                original_price=original_price,
                discounted_price=original_price,
                has_discount=False
            )

        calculation = calculate_discount(original_price, discount)
        logger.debug(
            f"Discount {discount.id} applied: {calculation.original_price} -> "
            f"{calculation.final_price} (rounded {calculation.rounded_final_price})"
        )

        return PriceWithDiscount(
            original_price=original_price,
            discounted_price=calculation.rounded_final_price,
            has_discount=True,
            discount=discount
        )
