# src/xregister/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides configuration management using Pydantic Settings. Values come from
environment variables and an optional .env file. Settings are frozen and
built once at startup by load_settings(); callers pass the instance into
the components that need it.

Files that USE this module:
- xregister.app (loads settings and wires components)
- xregister.adapters.providers (build_provider reads provider settings)

Files that this module USES:
- xregister.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from datetime import timedelta  # Sync interval type
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from xregister.shared.validators import (
    parse_currency_list,  # Split ';'-delimited currency lists
    parse_duration,  # Parse Go-style durations like "30m"
    validate_database_url,  # Check supported database URL schemes
)

PROVIDER_FREECURRENCYAPI = "freecurrencyapi"
PROVIDER_HTTP = "http"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )
    
    # --- Database ---
    database_url: str = Field(..., alias="DATABASE_URL")
    db_pool_size: int = Field(default=4, alias="DB_POOL_SIZE", ge=1, le=64)
    
    # --- HTTP Server ---
    http_port: int = Field(default=8080, alias="HTTP_PORT", ge=1, le=65535)
    
    # --- Rate Provider ---
    rate_provider: str = Field(default=PROVIDER_FREECURRENCYAPI, alias="EXCHANGE_RATE_PROVIDER")
    exchange_rate_api_url: str = Field(default="", alias="EXCHANGE_RATE_API_URL")
    free_currency_api_key: str = Field(default="", alias="FREE_CURRENCY_API_KEY")
    free_currency_api_url: str = Field(
        default="https://api.freecurrencyapi.com/v1", alias="FREE_CURRENCY_API_URL"
    )
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    
    # --- Sync ---
    sync_sleep: timedelta = Field(default=timedelta(minutes=30), alias="EXCHANGE_SYNC_SLEEP")
    currencies_from_raw: str = Field(default="USD;EUR;GBP;JPY", alias="EXCHANGE_CURRENCIES_FROM")
    currencies_to_raw: str = Field(default="BRL", alias="EXCHANGE_CURRENCIES_TO")
    sync_transactional: bool = Field(default=False, alias="EXCHANGE_SYNC_TRANSACTIONAL")
    
    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="XREGISTER_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")
    
    @property
    def currencies_from(self) -> list[str]:
        """Source currencies in configuration order."""
        return parse_currency_list(self.currencies_from_raw)
    
    @property
    def currencies_to(self) -> list[str]:
        """Target currencies in configuration order."""
        return parse_currency_list(self.currencies_to_raw)
    
    @property
    def sync_interval_seconds(self) -> float:
        return self.sync_sleep.total_seconds()
    
    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL scheme."""
        if not validate_database_url(v):
            raise ValueError("DATABASE_URL must start with sqlite:/// or postgresql://")
        return v
    
    @field_validator("sync_sleep", mode="before")
    @classmethod
    def validate_sync_sleep(cls, v) -> timedelta:
        """Accept "30m", "1h30m", "45s" or plain seconds."""
        return parse_duration(v)
    
    @field_validator("currencies_from_raw", "currencies_to_raw")
    @classmethod
    def validate_currencies(cls, v: str) -> str:
        """Reject empty lists and malformed codes early."""
        parse_currency_list(v)
        return v
    
    @field_validator("rate_provider")
    @classmethod
    def validate_rate_provider(cls, v: str) -> str:
        """Validate provider name."""
        v = v.strip().lower()
        if v not in (PROVIDER_FREECURRENCYAPI, PROVIDER_HTTP):
            raise ValueError(
                f"EXCHANGE_RATE_PROVIDER must be '{PROVIDER_FREECURRENCYAPI}' or '{PROVIDER_HTTP}'"
            )
        return v
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v


def load_settings(**overrides) -> Settings:
    """
    Build the application settings.
    
    Args:
        **overrides: Field values (by alias) that take precedence over the environment
        
    Returns:
        Frozen Settings instance
    """
    return Settings(**overrides)
