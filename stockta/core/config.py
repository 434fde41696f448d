"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import PositiveInt
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "StockTA Indicator Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Logging
    log_level: str = "INFO"

    # Indicator cache
    indicator_cache_enabled: bool = True
    indicator_cache_max_size: Optional[PositiveInt] = None  # None = unbounded
    indicator_cache_default_ttl_ms: Optional[PositiveInt] = None  # None = never expires

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
