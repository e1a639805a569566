"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "development"
    log_level: str = "info"

    # Default engine thresholds (px-equivalent units)
    cluster_radius: float = 150.0
    search_radius: float = 400.0
    min_separation: float = 200.0
    max_swatch_distance: float = 300.0
    max_container_viewport_ratio: float = 0.6

    model_config = SettingsConfigDict(
        env_prefix="SWATCHLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
