"""
Storefront pricing endpoints
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.models.discount import PriceWithDiscount
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.discount_repository import DiscountRepository
from app.services.pricing_service import PricingService

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


def get_pricing_service(db: AsyncSession = Depends(get_db_session)) -> PricingService:
    return PricingService(
        catalog_repo=CatalogRepository(db),
        discount_repo=DiscountRepository(db)
    )


@router.get(
    "/services/{service_id}/models/{model_id}",
    response_model=PriceWithDiscount,
    response_model_by_alias=True
)
async def get_service_price(
    service_id: str,
    model_id: str,
    price: Decimal = Query(..., ge=0, description="catalog price before discounts"),
    pricing_service: PricingService = Depends(get_pricing_service)
):
    """Displayed price of a service on a model, discount included"""
    return await pricing_service.get_price_with_discount(service_id, model_id, price)
