"""
Data models package
"""

from .catalog import CatalogModel
from .discount import (
    Discount,
    DiscountCreate,
    DiscountUpdate,
    DiscountCalculation,
    PriceWithDiscount,
    ApplicableDiscount,
    DiscountType,
    DiscountScopeType
)

__all__ = [
    "CatalogModel",
    "Discount",
    "DiscountCreate",
    "DiscountUpdate",
    "DiscountCalculation",
    "PriceWithDiscount",
    "ApplicableDiscount",
    "DiscountType",
    "DiscountScopeType"
]
