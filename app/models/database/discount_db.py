"""
Discount database model
"""

from sqlalchemy import Column, String, Integer, Numeric, Text, Boolean, DateTime
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.sql import func
from app.core.database import Base


class DiscountDB(Base):
    """Promotional discounts table"""

    __tablename__ = "discounts"

    # identity
    id = Column(String(50), primary_key=True, comment="discount id")
    name = Column(String(200), nullable=False, comment="display name")
    code = Column(String(50), nullable=False, unique=True, index=True, comment="redemption code, upper-case")
    description = Column(Text, comment="description")

    # pricing rule
    discount_type = Column(String(20), nullable=False, comment="percentage | fixed")
    discount_value = Column(Numeric(10, 2), nullable=False, comment="percent or currency amount")

    # scope
    scope_type = Column(String(20), nullable=False, comment="service | brand | series | model | all_services | all_models")
    service_id = Column(String(50), comment="single covered service (legacy)")
    service_ids = Column(ARRAY(String), default=list, comment="covered services")
    brand_id = Column(String(50), index=True, comment="brand scope")
    series_id = Column(String(50), index=True, comment="series scope")
    model_id = Column(String(50), index=True, comment="model scope")

    # lifecycle
    is_active = Column(Boolean, nullable=False, default=True, index=True, comment="active flag")
    starts_at = Column(DateTime(timezone=True), comment="start of validity")
    expires_at = Column(DateTime(timezone=True), index=True, comment="end of validity")
    max_uses = Column(Integer, comment="total usage cap")
    current_uses = Column(Integer, nullable=False, default=0, comment="redemptions so far")
    max_uses_per_user = Column(Integer, comment="per-user cap")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), comment="created")
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), comment="updated")

    __table_args__ = (
        {'comment': 'promotional discounts'}
    )
