"""
Services package
"""

from .pricing_service import PricingService
from .discount_service import DiscountService

__all__ = [
    "PricingService",
    "DiscountService"
]
