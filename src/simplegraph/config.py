"""Configuration management using Pydantic Settings.

This module provides centralized, type-safe configuration for Simple Graph.
Configuration is loaded from environment variables with sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(env_prefix="APP_")

    name: str = "simplegraph"
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


class APISettings(BaseSettings):
    """API server settings."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = 1
    reload: bool = True


class GraphSettings(BaseSettings):
    """Settings for the graph served by the API."""

    model_config = SettingsConfigDict(env_prefix="GRAPH_")

    storage_path: Path = Path("./data/graphs")
    bidirectional: bool = False
    snapshot: str | None = None

    def __init__(self, **data):  # type: ignore[no-untyped-def]
        super().__init__(**data)
        self.storage_path.mkdir(parents=True, exist_ok=True)

    @field_validator("snapshot")
    @classmethod
    def validate_snapshot(cls, v: str | None) -> str | None:
        """Treat an empty snapshot name as unset."""
        if v is not None and not v.strip():
            return None
        return v


class Settings(BaseSettings):
    """Main settings container aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    api: APISettings = Field(default_factory=APISettings)
    graph: GraphSettings = Field(default_factory=GraphSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
