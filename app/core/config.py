from pydantic_settings import BaseSettings
from typing import Optional
from enum import Enum


class Environment(str, Enum):

    """Runtime environment"""
    TESTING = "testing"
    PRODUCTION = "production"


class DiscountSelectionPolicy(str, Enum):
    """How the winner is picked when several discounts apply"""
    FIRST_MATCH = "first_match"  # repository order: newest first
    MOST_SPECIFIC = "most_specific"  # model > series > brand > service-level


class Settings(BaseSettings):

    # application
    app_name: str = "Repair Pricing Service"
    app_version: str = "1.0.0"
    environment: Environment = Environment.TESTING
    debug: bool = True
    admin_api_key: str = "admin-key-change-in-production"

    # database
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "repair_pricing_db"
    db_user: str = "repair_pricing_user"
    db_password: str = "repair_pricing_password"

    # redis (admin listing cache)
    redis_url: Optional[str] = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    # pricing
    currency_symbol: str = "Kč"
    discount_selection_policy: DiscountSelectionPolicy = DiscountSelectionPolicy.FIRST_MATCH
    discount_cache_ttl: int = 60

    # logging
    log_level: str = "INFO"

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def database_url_computed(self) -> str:
        """Database URL, built from parts unless given explicitly"""
        if self.database_url:
            return self.database_url
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def redis_url_computed(self) -> str:
        """Redis URL, built from parts unless given explicitly"""
        if self.redis_url:
            return self.redis_url
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
