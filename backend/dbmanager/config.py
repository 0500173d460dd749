"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"

    # Metadata store (databases, collections, fields and records live here)
    metadata_db_name: str = "dbmanager_metadata"

    # Per-database handles opened by the connection manager
    database_prefix: str = "dbmanager_"

    # Pause between close and reopen in reset_connection
    reset_delay_seconds: float = 0.5

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
