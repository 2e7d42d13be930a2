"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QuoteApiSettings(BaseModel):
    base_url: AnyHttpUrl = Field(
        default="https://api.quotable.io/",
        description="Origin of the quote search API; `search/quotes` is resolved against it.",
    )
    result_limit: int = Field(default=5, ge=1, le=150)
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Leave unset to keep the transport default timeout.",
    )
    insecure_transport: bool = Field(
        default=False,
        description="Disable TLS certificate and hostname verification. Never enable in production.",
    )

    @field_validator("request_timeout_seconds", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUOTEBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    default_language: str = "en"
    admin_telegram_id: int | None = None

    quote_api: QuoteApiSettings = Field(default_factory=QuoteApiSettings)


@lru_cache
def get_settings() -> BotSettings:
    """Return cached settings instance."""

    return BotSettings()  # type: ignore[call-arg]


__all__ = [
    "BotSettings",
    "QuoteApiSettings",
    "get_settings",
]
