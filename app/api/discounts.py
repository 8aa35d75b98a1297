"""
Admin discount endpoints
"""

import secrets
from typing import List, Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db_session
from app.core.exceptions import AdminAuthError, DiscountNotFoundError
from app.models.discount import ApplicableDiscount, Discount, DiscountCreate, DiscountUpdate
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.discount_repository import DiscountRepository
from app.services.discount_service import DiscountService


async def require_admin(x_admin_key: Optional[str] = Header(None)) -> None:
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.admin_api_key):
        raise AdminAuthError()


router = APIRouter(
    prefix="/api/admin/discounts",
    tags=["admin discounts"],
    dependencies=[Depends(require_admin)]
)


def get_discount_service(db: AsyncSession = Depends(get_db_session)) -> DiscountService:
    return DiscountService(
        discount_repo=DiscountRepository(db),
        catalog_repo=CatalogRepository(db)
    )


@router.get("", response_model=List[Discount])
async def list_active_discounts(discount_service: DiscountService = Depends(get_discount_service)):
    """Currently active discounts, newest first"""
    return await discount_service.get_active_discounts()


@router.post("", response_model=Discount, status_code=201)
async def create_discount(
    data: DiscountCreate,
    discount_service: DiscountService = Depends(get_discount_service)
):
    return await discount_service.create_discount(data)


@router.get("/applicable", response_model=List[ApplicableDiscount])
async def list_applicable_discounts(
    service_id: str,
    model_id: str,
    discount_service: DiscountService = Depends(get_discount_service)
):
    """Every discount that covers a service on a model"""
    return await discount_service.find_applicable_discounts(service_id, model_id)


@router.get("/code/{code}", response_model=Discount)
async def get_discount_by_code(
    code: str,
    discount_service: DiscountService = Depends(get_discount_service)
):
    discount = await discount_service.find_discount_by_code(code)
    if discount is None:
        raise DiscountNotFoundError(code)
    return discount


@router.put("/{discount_id}", response_model=Discount)
async def update_discount(
    discount_id: str,
    data: DiscountUpdate,
    discount_service: DiscountService = Depends(get_discount_service)
):
    return await discount_service.update_discount(discount_id, data)


@router.delete("/{discount_id}")
async def delete_discount(
    discount_id: str,
    discount_service: DiscountService = Depends(get_discount_service)
):
    await discount_service.delete_discount(discount_id)
    return {"success": True}
