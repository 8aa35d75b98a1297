"""
Database models package
"""

from .catalog_db import BrandDB, SeriesDB, DeviceModelDB, ServiceDB
from .discount_db import DiscountDB

__all__ = [
    "BrandDB",
    "SeriesDB",
    "DeviceModelDB",
    "ServiceDB",
    "DiscountDB"
]
