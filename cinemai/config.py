"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="CinemAI", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    openrouter_api_key: str | None = Field(
        default=None,
        alias="OPENROUTER_API_KEY",
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "API_KEY"),
    )
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash", alias="OPENROUTER_MODEL"
    )
    openrouter_api_url: HttpUrl = Field(
        default="https://openrouter.ai/api/v1", alias="OPENROUTER_API_URL"
    )
    request_timeout_seconds: float = Field(
        default=60.0, alias="REQUEST_TIMEOUT", gt=0
    )

    recommendation_count: int = Field(
        default=8, alias="RECOMMENDATION_COUNT", ge=1, le=25
    )
    sample_review_count: int = Field(
        default=3, alias="SAMPLE_REVIEW_COUNT", ge=1, le=10
    )

    history_limit: int = Field(default=8, alias="HISTORY_LIMIT", ge=1, le=50)
    history_key: str = Field(
        default="netflix_search_history", alias="HISTORY_KEY", min_length=1
    )

    catalogue_path: Path | None = Field(default=None, alias="CATALOGUE_PATH")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./cinemai.db", alias="DATABASE_URL"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("openrouter_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        """Treat an empty API key as not configured."""

        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("catalogue_path", mode="before")
    @classmethod
    def _blank_path_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", populate_by_name=True
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
