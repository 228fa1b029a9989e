"""
Configuration Module
Version: 1.0.0

Centralized configuration with validation.
Everything comes from the environment (or .env); no secrets in code.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("configuration")


class Settings(BaseSettings):

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_ENV: str = Field(default="development")
    APP_NAME: str = Field(default="Zeno Knows")
    APP_VERSION: str = Field(default="1.0.0")
    LOG_LEVEL: str = Field(default="INFO")

    # =========================================================================
    # REDIS (optional - config blobs and tool data)
    # =========================================================================
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection string; config store disabled when unset"
    )
    REDIS_MAX_CONNECTIONS: int = Field(default=20)

    # =========================================================================
    # TAXONOMY
    # =========================================================================
    TAXONOMY_SOURCE: str = Field(
        default="config/taxonomy.json",
        description="Path or http(s) URL of the taxonomy document"
    )
    TAXONOMY_FROM_REDIS: bool = Field(
        default=False,
        description="Prefer the taxonomy-config blob in Redis over TAXONOMY_SOURCE"
    )
    TAXONOMY_FETCH_TIMEOUT: float = Field(default=5.0)

    # =========================================================================
    # TOOL DATA
    # =========================================================================
    TOOLS_DATA_PATH: str = Field(default="config/data.json")
    FEATURED_TOOLS_LIMIT: int = Field(default=6)
    RECENT_TOOLS_LIMIT: int = Field(default=5)

    # =========================================================================
    # CURATOR ACCESS
    # =========================================================================
    CURATOR_API_KEY: Optional[str] = Field(
        default=None,
        description="Shared key for curator write endpoints (X-Curator-Key header)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def DEBUG(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def redis_enabled(self) -> bool:
        return bool(self.REDIS_URL)

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator('TAXONOMY_SOURCE')
    @classmethod
    def validate_taxonomy_source(cls, v: str) -> str:
        v = v.strip()
        if "://" in v and not v.startswith(('http://', 'https://')):
            raise ValueError(f"Taxonomy URL must start with http or https: {v}")
        return v

    @field_validator('REDIS_URL')
    @classmethod
    def validate_redis_url(cls, v: Optional[str]) -> Optional[str]:
        if v and not v.startswith(('redis://', 'rediss://', 'unix://')):
            raise ValueError(f"REDIS_URL must be a redis:// URL: {v}")
        return v or None


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Fails loudly if the environment holds invalid values.
    """
    try:
        return Settings()
    except Exception as e:
        logger.critical(f"FATAL CONFIG ERROR: Could not load settings: {e}")
        raise
