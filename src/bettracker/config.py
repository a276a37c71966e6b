"""Environment-driven configuration helpers for BetTracker."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: AnyUrl | str = Field(default="sqlite:///./bettracker.db")

    max_legs_per_bet: int = Field(default=10, ge=1, le=100)
    unresolved_bucket: str = Field(default="[Unresolved]")

    bettracker_api_key: str = Field(default="", validation_alias="BETTRACKER_API_KEY")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


def get_api_access_key() -> str | None:
    """Return the configured API key, or None when the API is open."""

    key = os.getenv("BETTRACKER_API_KEY") or get_settings().bettracker_api_key
    return key or None
