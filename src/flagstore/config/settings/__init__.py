"""Config settings – 12-factor env-based configuration."""
from flagstore.config.settings.app import AppSettings, DatabaseSettings
from flagstore.config.settings.base import Settings
from flagstore.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
]
