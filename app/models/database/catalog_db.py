"""
Catalog database models

Owned by the catalog management side; the pricing engine only reads them.
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.core.database import Base


class BrandDB(Base):
    """Device brands"""

    __tablename__ = "brands"

    id = Column(String(50), primary_key=True, comment="brand id")
    name = Column(String(200), nullable=False, comment="brand name")
    slug = Column(String(200), unique=True, comment="url slug")
    position = Column(Integer, default=0, comment="sort position")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SeriesDB(Base):
    """Product lines within a brand"""

    __tablename__ = "series"

    id = Column(String(50), primary_key=True, comment="series id")
    brand_id = Column(String(50), ForeignKey("brands.id"), nullable=False, index=True, comment="owning brand")
    name = Column(String(200), nullable=False, comment="series name")
    slug = Column(String(200), unique=True, comment="url slug")
    position = Column(Integer, default=0, comment="sort position")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DeviceModelDB(Base):
    """Repairable device models"""

    __tablename__ = "models"

    id = Column(String(50), primary_key=True, comment="model id")
    brand_id = Column(String(50), ForeignKey("brands.id"), nullable=False, index=True, comment="owning brand")
    series_id = Column(String(50), ForeignKey("series.id"), index=True, comment="owning series, optional")
    name = Column(String(200), nullable=False, comment="model name")
    slug = Column(String(200), unique=True, comment="url slug")
    position = Column(Integer, default=0, comment="sort position")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ServiceDB(Base):
    """Repair services"""

    __tablename__ = "services"

    id = Column(String(50), primary_key=True, comment="service id")
    slug = Column(String(200), unique=True, comment="url slug")
    position = Column(Integer, default=0, comment="sort position")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
