"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="MovieMitra", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_read_access_token: str | None = Field(
        default=None,
        alias="TMDB_READ_ACCESS_TOKEN",
        validation_alias=AliasChoices(
            "TMDB_READ_ACCESS_TOKEN", "VITE_API_READ_ACCESS_TOKEN"
        ),
    )
    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_language: str = Field(default="en-US", alias="TMDB_LANGUAGE")
    catalog_timeout_seconds: float = Field(
        default=20.0, alias="CATALOG_TIMEOUT", gt=0, le=120
    )

    debounce_seconds: float = Field(
        default=0.5, alias="DEBOUNCE_SECONDS", ge=0, le=5
    )

    openrouter_api_key: str | None = Field(
        default=None, alias="OPENROUTER_API_KEY"
    )
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash-lite", alias="OPENROUTER_MODEL"
    )
    openrouter_api_url: HttpUrl = Field(
        default="https://openrouter.ai/api/v1", alias="OPENROUTER_API_URL"
    )
    openrouter_timeout_seconds: float = Field(
        default=60.0, alias="OPENROUTER_TIMEOUT", gt=0, le=300
    )
    summary_max_tokens: int = Field(
        default=400, alias="SUMMARY_MAX_TOKENS", ge=50, le=4_000
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("tmdb_read_access_token", "openrouter_api_key", mode="before")
    @classmethod
    def _blank_secret_is_missing(cls, value: object) -> object:
        """Treat empty or whitespace-only secrets as unset."""

        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def require_catalog_token(self) -> str:
        """Return the TMDB bearer token or fail fast when it is missing."""

        if not self.tmdb_read_access_token:
            raise ConfigError(
                "TMDB_READ_ACCESS_TOKEN must be configured to query the catalog"
            )
        return self.tmdb_read_access_token

    @property
    def summaries_enabled(self) -> bool:
        return bool(self.openrouter_api_key)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
