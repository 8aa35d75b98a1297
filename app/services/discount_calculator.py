"""
Discount calculation rules

Pure functions, no I/O: the activity check, service and scope matching,
winner selection, the price calculation and the ".90" retail rounding.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from app.core.config import DiscountSelectionPolicy, settings
from app.models.catalog import CatalogModel
from app.models.discount import Discount, DiscountCalculation, DiscountScopeType, DiscountType

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")
MIN_ROUNDED_PRICE = Decimal("90")

# most_specific ranking, lower wins
SCOPE_SPECIFICITY = {
    DiscountScopeType.MODEL: 0,
    DiscountScopeType.SERIES: 1,
    DiscountScopeType.BRAND: 2,
    DiscountScopeType.SERVICE: 3,
    DiscountScopeType.ALL_MODELS: 4,
    DiscountScopeType.ALL_SERVICES: 4,
}

SCOPE_DESCRIPTIONS = {
    DiscountScopeType.SERVICE: "Discount on a specific service",
    DiscountScopeType.BRAND: "Discount on all services for a brand",
    DiscountScopeType.SERIES: "Discount on all models of a series",
    DiscountScopeType.MODEL: "Discount on a specific model",
    DiscountScopeType.ALL_SERVICES: "Discount on all services",
    DiscountScopeType.ALL_MODELS: "Discount on all models",
}


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_to_nearest_90(price: Number) -> Decimal:
    """Round a price to the closest value ending in 90 that is not below it.

    The nearest hundred minus ten is tried first; when that undershoots the
    price the next step up is used, so a customer never sees less than the
    true discounted amount. Positive prices never go below 90, and
    non-positive prices map to 0.
    """
    price = to_decimal(price)
    if price <= 0:
        return Decimal("0")

    rounded = (price / HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP) * HUNDRED - 10
    if rounded < price:
        rounded += HUNDRED

    return max(MIN_ROUNDED_PRICE, rounded)


def calculate_discount(price: Number, discount: Discount) -> DiscountCalculation:
    """Apply an already active, in-scope discount to a price"""
    price = to_decimal(price)

    if discount.discount_type == DiscountType.PERCENTAGE:
        discount_amount = price * discount.discount_value / HUNDRED
    else:
        discount_amount = discount.discount_value

    final_price = max(Decimal("0"), price - discount_amount)

    return DiscountCalculation(
        original_price=price,
        discount_amount=discount_amount,
        final_price=final_price,
        rounded_final_price=round_to_nearest_90(final_price),
        discount=discount
    )


def is_discount_active(discount: Discount, now: Optional[datetime] = None) -> bool:
    """Whether the discount can be used at `now`.

    Requires the active flag, a start in the past (or none), an expiry in the
    future (or none) and remaining usage under the cap (or no cap).
    """
    if not discount.is_active:
        return False

    if now is None:
        now = utcnow()

    if discount.starts_at is not None and discount.starts_at > now:
        return False

    if discount.expires_at is not None and discount.expires_at <= now:
        return False

    if discount.max_uses is not None and discount.current_uses >= discount.max_uses:
        return False

    return True


def service_covered(discount: Discount, service_id: str) -> bool:
    """Whether the discount's service association includes `service_id`"""
    return service_id in discount.service_ids or discount.service_id == service_id


def matches_scope(discount: Discount, model: CatalogModel) -> bool:
    """Whether the discount's catalog scope covers the model.

    Service-level scopes carry no brand/series/model restriction; for them the
    service association alone decides.
    """
    scope = discount.scope_type

    if scope in (DiscountScopeType.ALL_MODELS, DiscountScopeType.SERVICE, DiscountScopeType.ALL_SERVICES):
        return True
    if scope == DiscountScopeType.BRAND:
        return discount.brand_id is not None and discount.brand_id == model.brand_id
    if scope == DiscountScopeType.SERIES:
        return discount.series_id is not None and discount.series_id == model.series_id
    if scope == DiscountScopeType.MODEL:
        return discount.model_id is not None and discount.model_id == model.id
    return False


def select_discount(
    candidates: List[Discount],
    policy: Optional[DiscountSelectionPolicy] = None
) -> Optional[Discount]:
    """Pick the single discount that applies; None when there are no candidates"""
    if not candidates:
        return None

    if policy is None:
        policy = settings.discount_selection_policy

    if policy == DiscountSelectionPolicy.MOST_SPECIFIC:
        # min() keeps the first of equally specific candidates
        return min(candidates, key=lambda d: SCOPE_SPECIFICITY.get(d.scope_type, len(SCOPE_SPECIFICITY)))

    return candidates[0]


def format_discount_value(discount: Discount, currency_symbol: Optional[str] = None) -> str:
    """Display form: "15%" or "500 Kč" """
    value = discount.discount_value.normalize()
    if value == value.to_integral():
        value = value.quantize(Decimal("1"))

    if discount.discount_type == DiscountType.PERCENTAGE:
        return f"{value}%"
    return f"{value} {currency_symbol or settings.currency_symbol}"


def describe_discount_scope(discount: Discount) -> str:
    return SCOPE_DESCRIPTIONS.get(discount.scope_type, "Discount")
