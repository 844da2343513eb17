"""Configuration system for ClinAudit."""

from clinaudit.config.settings import (
    DatabaseSettings,
    Settings,
    StoreSettings,
    get_settings,
    load_config,
)

__all__ = [
    "Settings",
    "StoreSettings",
    "DatabaseSettings",
    "get_settings",
    "load_config",
]
