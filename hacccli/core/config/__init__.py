"""Configuration management for hacccli."""

from hacccli.core.config.loader import ConfigLoader
from hacccli.core.config.settings import (
    GitHubSettings,
    LoggingSettings,
    Settings,
    StagingSettings,
    StoreSettings,
    get_settings,
)

__all__ = [
    "ConfigLoader",
    "Settings",
    "StoreSettings",
    "GitHubSettings",
    "StagingSettings",
    "LoggingSettings",
    "get_settings",
]
