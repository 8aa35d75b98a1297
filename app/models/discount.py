"""
Discount data models

Discount is the one canonical shape the pricing engine works with. Rows from
the database and JSON from the admin screens (camelCase or snake_case) are
converted into it at the boundary.
"""

from decimal import Decimal
from datetime import datetime, timezone
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field, PlainSerializer, validator, model_validator
from pydantic.alias_generators import to_camel
from enum import Enum


# Decimal internally, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class DiscountType(str, Enum):
    """How discount_value is interpreted"""
    PERCENTAGE = "percentage"  # percent of the price
    FIXED = "fixed"  # currency amount


class DiscountScopeType(str, Enum):
    """Which part of the catalog a discount covers"""
    SERVICE = "service"
    BRAND = "brand"
    SERIES = "series"
    MODEL = "model"
    ALL_SERVICES = "all_services"
    ALL_MODELS = "all_models"


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return v
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


def check_discount_rule(
    discount_type: Optional[DiscountType],
    discount_value: Optional[Decimal],
    starts_at: Optional[datetime],
    expires_at: Optional[datetime]
) -> None:
    """Admin-side limits on a stored discount; raises ValueError.

    Missing values are skipped so partial updates can be checked too.
    """
    if discount_type == DiscountType.PERCENTAGE and discount_value is not None and discount_value > 100:
        raise ValueError('percentage discount cannot exceed 100')

    if starts_at and expires_at and expires_at <= starts_at:
        raise ValueError('expires_at must be later than starts_at')


class CamelModel(BaseModel):
    """Accepts snake_case and camelCase, dumps camelCase by alias"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Discount(CamelModel):
    """Promotional discount rule"""

    id: str = Field(..., description="discount id")
    name: str = Field(..., description="display name")
    code: str = Field(..., min_length=1, max_length=50, description="redemption code")
    description: Optional[str] = Field(None, description="free-text description")

    discount_type: DiscountType = Field(..., description="percentage or fixed amount")
    discount_value: Money = Field(..., ge=0, description="percent or currency amount")

    scope_type: DiscountScopeType = Field(..., description="catalog scope")
    service_id: Optional[str] = Field(None, description="single covered service (legacy)")
    service_ids: List[str] = Field(default_factory=list, description="covered services")
    brand_id: Optional[str] = None
    series_id: Optional[str] = None
    model_id: Optional[str] = None

    is_active: bool = Field(default=True)
    starts_at: Optional[datetime] = Field(None, description="not usable before this instant")
    expires_at: Optional[datetime] = Field(None, description="not usable from this instant on")
    max_uses: Optional[int] = Field(None, ge=0, description="total usage cap")
    current_uses: int = Field(default=0, ge=0, description="redemptions so far")
    max_uses_per_user: Optional[int] = Field(None, ge=1, description="per-user cap, not enforced")

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @validator('service_ids', pre=True)
    def validate_service_ids(cls, v):
        """NULL arrays from the database become an empty list"""
        return v or []

    @validator('starts_at', 'expires_at', 'created_at', 'updated_at')
    def validate_timezone(cls, v):
        """Naive timestamps are UTC"""
        return _as_utc(v)


class DiscountCreate(CamelModel):
    """Admin input for a new discount"""

    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal = Field(..., ge=0)
    scope_type: DiscountScopeType
    service_id: Optional[str] = None
    service_ids: List[str] = Field(default_factory=list)
    brand_id: Optional[str] = None
    series_id: Optional[str] = None
    model_id: Optional[str] = None
    is_active: bool = True
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = Field(None, ge=1)
    max_uses_per_user: Optional[int] = Field(None, ge=1)

    @validator('code')
    def validate_code(cls, v):
        """Codes are stored upper-case"""
        v = v.strip().upper()
        if not v:
            raise ValueError('code must not be blank')
        return v

    @validator('starts_at', 'expires_at')
    def validate_timezone(cls, v):
        return _as_utc(v)

    @model_validator(mode='after')
    def validate_rule(self):
        check_discount_rule(self.discount_type, self.discount_value, self.starts_at, self.expires_at)

        required_key = {
            DiscountScopeType.BRAND: 'brand_id',
            DiscountScopeType.SERIES: 'series_id',
            DiscountScopeType.MODEL: 'model_id',
        }.get(self.scope_type)
        if required_key and not getattr(self, required_key):
            raise ValueError(f'{required_key} is required for scope {self.scope_type.value}')

        if self.service_id and self.service_id not in self.service_ids:
            self.service_ids = [*self.service_ids, self.service_id]
        return self


class DiscountUpdate(CamelModel):
    """Partial admin update; omitted fields stay as they are"""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = Field(None, ge=0)
    service_ids: Optional[List[str]] = None
    is_active: Optional[bool] = None
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = Field(None, ge=1)
    max_uses_per_user: Optional[int] = Field(None, ge=1)

    @validator('name', 'discount_type', 'discount_value', 'is_active')
    def validate_not_null(cls, v):
        """These columns are NOT NULL: omit them instead of sending null"""
        if v is None:
            raise ValueError("cannot be null")
        return v

    @validator('starts_at', 'expires_at')
    def validate_timezone(cls, v):
        return _as_utc(v)

    @model_validator(mode='after')
    def validate_rule(self):
        # checked again against the stored row by the service
        check_discount_rule(self.discount_type, self.discount_value, self.starts_at, self.expires_at)
        return self


class DiscountCalculation(CamelModel):
    """One discount applied to one price"""

    original_price: Money
    discount_amount: Money
    final_price: Money
    rounded_final_price: Money
    discount: Discount


class PriceWithDiscount(CamelModel):
    """What the storefront receives for a (service, model) price"""

    original_price: Money
    discounted_price: Money
    has_discount: bool
    discount: Optional[Discount] = None


class ApplicableDiscount(CamelModel):
    """A candidate discount plus display labels for the admin screens"""

    discount: Discount
    applicable_to: str
    display_value: str = Field(..., description='"15%" or "500 Kč"')
    scope_description: str
