# src/goldrate/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a .env file with validation.

Files that USE this module:
- goldrate.app (loads settings for logging and the refresh loop)
- goldrate.adapters.crawlers.proxy_fetcher (proxy timeout)
- goldrate.adapters.persistence.* (history file, Supabase endpoint)
- goldrate.adapters.providers.exchange_rates (Supabase endpoint, cache TTL)
- goldrate.application.price_engine (batch size, batch delay, default source)

Files that this module USES:
- goldrate.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from goldrate.shared.validators import (
    validate_api_key,  # Validate API key format
    validate_http_url,  # Validate absolute HTTP(S) URLs
    validate_slug,  # Validate source slug format
)

PERSISTENCE_BACKENDS = ("file", "supabase", "none")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Proxy fetching ---
    proxy_timeout_seconds: float = Field(default=15.0, alias="PROXY_TIMEOUT_SECONDS", gt=0, le=120)

    # --- Batching (multi-country refresh) ---
    batch_size: int = Field(default=3, alias="BATCH_SIZE", ge=1, le=50)
    batch_delay_seconds: float = Field(default=0.5, alias="BATCH_DELAY_SECONDS", ge=0, le=60)

    # --- Sources ---
    default_source: str = Field(default="qatar", alias="DEFAULT_SOURCE")

    # --- Scheduling ---
    refresh_interval_minutes: int = Field(default=5, alias="REFRESH_INTERVAL_MINUTES", ge=1, le=1440)
    run_once: bool = Field(default=False, alias="RUN_ONCE")

    # --- Persistence ---
    persistence_backend: str = Field(default="file", alias="PERSISTENCE_BACKEND")
    price_history_file: Path = Field(
        default=Path("./data/price_history.json"), alias="PRICE_HISTORY_FILE"
    )
    history_max_records: int = Field(default=5000, alias="HISTORY_MAX_RECORDS", ge=1)

    # --- Supabase (edge functions for persistence and exchange rates) ---
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_anon_key: str = Field(default="", alias="SUPABASE_ANON_KEY")
    save_prices_function: str = Field(default="save-gold-prices", alias="SAVE_PRICES_FUNCTION")
    exchange_rates_function: str = Field(default="get-exchange-rates", alias="EXCHANGE_RATES_FUNCTION")

    # --- HTTP Settings (blocking calls: persistence, exchange rates) ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    exchange_rates_cache_minutes: int = Field(default=60, alias="EXCHANGE_RATES_CACHE_MINUTES", ge=1, le=1440)

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="GOLDRATE_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def supabase_configured(self) -> bool:
        """True when both the Supabase URL and anon key are set."""
        return bool(self.supabase_url and self.supabase_anon_key)

    def function_url(self, name: str) -> str:
        """
        Build the URL of a Supabase edge function.

        Args:
            name: Function name (e.g. "save-gold-prices")

        Returns:
            Absolute function URL
        """
        return f"{self.supabase_url.rstrip('/')}/functions/v1/{name}"

    @field_validator("default_source")
    @classmethod
    def validate_default_source(cls, v: str) -> str:
        """Validate source slug format."""
        if not validate_slug(v):
            raise ValueError("DEFAULT_SOURCE must be a lowercase slug like 'qatar'")
        return v

    @field_validator("persistence_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate persistence backend name."""
        v = v.lower()
        if v not in PERSISTENCE_BACKENDS:
            raise ValueError(f"PERSISTENCE_BACKEND must be one of {', '.join(PERSISTENCE_BACKENDS)}")
        return v

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Validate Supabase URL format."""
        if v and not validate_http_url(v):
            raise ValueError("Invalid SUPABASE_URL format")
        return v

    @field_validator("supabase_anon_key")
    @classmethod
    def validate_anon_key(cls, v: str) -> str:
        """Validate API key format."""
        if v and not validate_api_key(v):
            raise ValueError("Invalid SUPABASE_ANON_KEY format")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return v


# Global settings instance
settings = Settings()
