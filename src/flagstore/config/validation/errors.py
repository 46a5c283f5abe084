"""Config validation – errors raised while reading ``DB_*`` / ``APP_*`` variables."""
from __future__ import annotations

from flagstore.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Root of every configuration failure; the process should not start."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_required_setting"

    def __init__(self, env_var: str) -> None:
        super().__init__(f"{env_var} must be set", detail={"env_var": env_var})
        self.env_var = env_var


class InvalidSettingValueError(ConfigError):
    """A variable is set but cannot be used, e.g. ``DB_PORT=abc`` or ``APP_ENV=staging``."""

    default_code = "invalid_setting_value"

    def __init__(self, env_var: str, value: object, reason: str) -> None:
        super().__init__(f"{env_var}={value!r} rejected: {reason}", detail={"env_var": env_var})
        self.env_var = env_var
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
