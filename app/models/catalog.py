"""
Catalog read models used by the pricing engine
"""

from typing import Optional
from pydantic import BaseModel


class CatalogModel(BaseModel):
    """A repairable device model, reduced to what scope matching needs"""

    id: str
    brand_id: str
    series_id: Optional[str] = None
    name: Optional[str] = None
