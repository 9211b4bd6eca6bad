"""Configuration settings for the workspace sync service."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="WORKSPACE_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"
    service_name: str = "workspace-sync"

    # Content
    max_follow_ups: int = Field(3, ge=1, le=3, description="Follow-ups allowed per task, at most 3")
    due_date_spacing_days: int = 2

    # Metrics: contribution dates are bucketed in this timezone
    metrics_timezone: str = "UTC"

    # Content generator
    llm_provider: str = "google_genai"
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.7

    # HTTP
    api_host: str = "127.0.0.1"
    api_port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
