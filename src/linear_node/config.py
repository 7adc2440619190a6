"""Configuration management for linear-node."""

import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env" if os.getenv("ENVIRONMENT") != "test" else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Linear Node"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Linear API
    linear_api_url: str = "https://api.linear.app/graphql"
    linear_api_key: Optional[str] = Field(
        default=None,
        description="Personal API key, sent verbatim in the Authorization header",
    )
    linear_oauth_access_token: Optional[str] = Field(
        default=None,
        description="OAuth2 access token, used when no API key is configured",
    )
    http_timeout: float = 30.0

    # Pagination
    pagination_max_pages: int = Field(
        default=1000,
        description="Upper bound on pages fetched by a single paginated call (0 = unbounded)",
    )

    # Webhook trigger
    linear_webhook_secret: Optional[str] = None
    webhook_path: str = "/webhook"

    @field_validator("linear_api_key", "linear_oauth_access_token", "linear_webhook_secret", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("pagination_max_pages")
    @classmethod
    def validate_max_pages(cls, v):
        if v < 0:
            raise ValueError("pagination_max_pages must be >= 0")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
