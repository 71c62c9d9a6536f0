"""
Runtime settings for the portfolio dashboard.

Values come from ``RUNTIMETRADE_*`` environment variables or a ``.env`` file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from runtimetrade.core.constants import (
    DEFAULT_DISPLAY_CURRENCY,
    DEFAULT_EXCHANGE_RATE_SYMBOL,
    DEFAULT_QUOTE_CACHE_TTL_SECONDS,
    DEFAULT_QUOTE_POLL_SECONDS,
    DEFAULT_QUOTE_TIMEOUT_SECONDS,
    DEFAULT_USER_ID,
    DEFAULT_YAHOO_BASE_URL,
    MIN_QUOTE_POLL_SECONDS,
    SUPPORTED_DISPLAY_CURRENCIES,
)
from runtimetrade.core.exceptions.portfolio import ConfigurationError

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class DashboardSettings(BaseSettings):
    """Configuration options for the dashboard service, API and scripts."""

    model_config = SettingsConfigDict(
        env_prefix="RUNTIMETRADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default=Path("data"), description="Directory holding the CSV store.")
    log_level: str = Field(default="INFO")
    default_user_id: str = Field(default=DEFAULT_USER_ID)

    quote_feed_enabled: bool = Field(default=False)
    quote_poll_interval_seconds: float = Field(default=DEFAULT_QUOTE_POLL_SECONDS)
    quote_cache_ttl_seconds: float = Field(default=DEFAULT_QUOTE_CACHE_TTL_SECONDS, ge=0.0)
    quote_request_timeout_seconds: float = Field(default=DEFAULT_QUOTE_TIMEOUT_SECONDS, gt=0.0)
    yahoo_base_url: str = Field(default=DEFAULT_YAHOO_BASE_URL)

    display_currency: str = Field(default=DEFAULT_DISPLAY_CURRENCY)
    exchange_rate_symbol: str = Field(default=DEFAULT_EXCHANGE_RATE_SYMBOL)

    allow_oversell: bool = Field(
        default=False,
        description="Accept sells larger than the held quantity.",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigurationError(f"log_level must be one of {VALID_LOG_LEVELS}, got {value!r}")
        return level

    @field_validator("quote_poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, value: float) -> float:
        if value < MIN_QUOTE_POLL_SECONDS:
            raise ConfigurationError(
                f"quote_poll_interval_seconds must be at least {MIN_QUOTE_POLL_SECONDS}, got {value}"
            )
        return value

    @field_validator("display_currency")
    @classmethod
    def validate_display_currency(cls, value: str) -> str:
        currency = value.strip().upper()
        if currency not in SUPPORTED_DISPLAY_CURRENCIES:
            raise ConfigurationError(
                f"display_currency must be one of {SUPPORTED_DISPLAY_CURRENCIES}, got {value!r}"
            )
        return currency

    @field_validator("default_user_id")
    @classmethod
    def validate_default_user_id(cls, value: str) -> str:
        if not value.strip():
            raise ConfigurationError("default_user_id must not be empty")
        return value.strip()

    def dict_for_logging(self) -> dict[str, Any]:
        """Return settings as a plain dict for startup logging."""
        return {key: str(value) for key, value in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings() -> DashboardSettings:
    """Return cached dashboard settings."""
    return DashboardSettings()


__all__ = ["DashboardSettings", "get_settings"]
