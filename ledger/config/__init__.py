"""Configuration package."""

from ledger.config.settings import (
    AppSettings,
    HistorySettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "HistorySettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
