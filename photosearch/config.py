"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PixabaySettings(BaseModel):
    api_key: SecretStr | None = Field(
        default=None,
        description="Pixabay API key, supplied out of band (environment or .env).",
    )
    base_url: AnyHttpUrl = Field(default="https://pixabay.com/api/")
    per_page: int = Field(default=200, ge=3, le=200)
    safesearch: bool = True
    fallback_query: str = Field(
        default="paris",
        min_length=1,
        description="Query sent when the user's text cannot be percent-encoded.",
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Leave unset to use the HTTP client's own timeout.",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class DebounceSettings(BaseModel):
    quiet_period_seconds: float = Field(default=1.0, gt=0, le=30)
    cancel_superseded: bool = False


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PHOTOSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    pixabay: PixabaySettings = Field(default_factory=PixabaySettings)
    debounce: DebounceSettings = Field(default_factory=DebounceSettings)


@lru_cache
def get_settings() -> AppSettings:
    """Return cached settings instance."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DebounceSettings",
    "PixabaySettings",
    "get_settings",
]
