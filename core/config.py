"""
Application configuration management.

Uses pydantic-settings for type-safe environment variable parsing.
All configuration is centralized here so the storage layer and the
demo driver never call os.getenv() themselves.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation and type coercion.

    Values are loaded from environment variables or .env file.
    All fields have sensible defaults for a local MongoDB.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Backend Selection
    # Options: "mongodb", "memory"
    storage_backend: Literal["mongodb", "memory"] = "mongodb"

    # MongoDB Configuration
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "testdb"
    mongodb_collection: str = "contacts"
    mongodb_user: Optional[str] = None
    mongodb_password: Optional[str] = None

    # Every call to the server gets its own window of this many seconds
    operation_timeout_seconds: float = Field(default=5.0, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_mongodb(self) -> bool:
        """Check if using MongoDB backend."""
        return self.storage_backend == "mongodb"

    @property
    def is_memory(self) -> bool:
        """Check if using the in-memory backend."""
        return self.storage_backend == "memory"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings singleton.

    Use this function to get settings instance throughout the application.
    The @lru_cache ensures we only parse environment once.
    """
    return Settings()


# Convenience export for direct import
settings = get_settings()
