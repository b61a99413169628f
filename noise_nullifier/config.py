"""Configuration management for NoiseNullifier."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # PagerDuty credentials, both required
    pd_secret: str = Field(min_length=1, description="Webhook signing secret")
    pd_apikey: str = Field(min_length=1, description="REST API key")

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    log_level: str = Field(default="INFO")

    # Upstream / downstream
    pagerduty_api_url: str = Field(default="https://api.pagerduty.com")
    alertmanager_silence_path: str = Field(default="/api/v2/silences")
    http_timeout: float = Field(default=30.0, gt=0)

    # Processing
    max_concurrent_events: int = Field(default=16, ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()
