"""Config – 12-factor settings and loaders."""

from flagstore.config.settings import (
    AppSettings,
    DatabaseSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsLoader,
)
from flagstore.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "AppSettings",
    "ConfigError",
    "DatabaseSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
