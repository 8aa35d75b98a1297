"""
Repositories package - database access layer
"""

from .catalog_repository import CatalogRepository
from .discount_repository import DiscountRepository

__all__ = [
    "CatalogRepository",
    "DiscountRepository"
]
