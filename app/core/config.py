from functools import cached_property
from typing import List, Optional

from pydantic_settings import BaseSettings

from app.schemas.auction import FeeConfig


class Settings(BaseSettings):
    # Fee schedule
    STORAGE_FEE: float = 100.0
    BASE_FEE_PERCENTAGE: float = 0.10
    COMMON_BASE_FEE_MIN: float = 10.0
    COMMON_BASE_FEE_MAX: float = 50.0
    LUXURY_BASE_FEE_MIN: float = 25.0
    LUXURY_BASE_FEE_MAX: float = 200.0
    COMMON_SPECIAL_FEE_PERCENTAGE: float = 0.02
    LUXURY_SPECIAL_FEE_PERCENTAGE: float = 0.04

    CORS_ALLOWED_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:5175",
    ]

    RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW: float = 60.0  # seconds
    RATE_LIMIT_QUEUE_LIMIT: int = 2
    TRUST_FORWARDED_FOR: bool = False

    REDIS_URL: Optional[str] = None
    PRICE_CACHE_TTL: int = 60   # 60 seconds

    # Used by app.client
    API_BASE_URL: Optional[str] = None
    API_TIMEOUT: float = 10.0

    API_TITLE: str = "Auction Fee Service"
    API_DESCRIPTION: str = "Fee breakdown calculation for vehicles sold at auction"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

    @cached_property
    def fee_config(self) -> FeeConfig:
        return FeeConfig(
            storage_fee=self.STORAGE_FEE,
            base_fee_percentage=self.BASE_FEE_PERCENTAGE,
            common_base_fee_min=self.COMMON_BASE_FEE_MIN,
            common_base_fee_max=self.COMMON_BASE_FEE_MAX,
            luxury_base_fee_min=self.LUXURY_BASE_FEE_MIN,
            luxury_base_fee_max=self.LUXURY_BASE_FEE_MAX,
            common_special_fee_percentage=self.COMMON_SPECIAL_FEE_PERCENTAGE,
            luxury_special_fee_percentage=self.LUXURY_SPECIAL_FEE_PERCENTAGE,
        )


settings = Settings()
