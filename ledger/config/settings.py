"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The core has no external services, so configuration is limited to
history retention, persistence location and startup defaults.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HistorySettings(BaseSettings):
    """Undo/redo history configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_HISTORY_",
        extra="ignore"
    )

    limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum number of snapshots kept in the history log"
    )


class StorageSettings(BaseSettings):
    """Local document storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    path: str = Field(
        default="ledger.json",
        description="Path of the JSON document the ledger is saved to"
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write/read is attempted"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for the structured logger"
    )

    # Currency defaults
    default_main_currency: str = Field(
        default="USD",
        min_length=1,
        max_length=10,
        description="Main currency of a freshly created ledger"
    )
    seed_default_currencies: bool = Field(
        default=True,
        description="Seed a new ledger with the built-in currency list"
    )

    @field_validator('default_main_currency')
    @classmethod
    def normalize_currency_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def history(self) -> HistorySettings:
        return HistorySettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("history", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
