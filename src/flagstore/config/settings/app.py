"""Config settings – database and HTTP server settings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from sqlalchemy.engine import URL, make_url

from flagstore.config.settings.base import Settings
from flagstore.config.validation import InvalidSettingValueError

_ENVIRONMENTS = ("development", "test", "production")


@dataclasses.dataclass
class DatabaseSettings(Settings):
    """Store connection settings, read from ``DB_*`` variables."""

    _prefix: ClassVar[str] = "DB"

    host: str = "localhost"
    port: int = 5432
    name: str = "feature_flags"
    user: str = "postgres"
    password: str = dataclasses.field(default="", repr=False)
    pool_max: int = 20
    ssl: bool = False
    connect_timeout: float = 2.0
    pool_timeout: float = 2.0
    echo: bool = False
    url: str = ""

    def _validate(self) -> None:
        if self.pool_max < 1:
            raise InvalidSettingValueError("DB_POOL_MAX", self.pool_max, "must be >= 1")
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError("DB_PORT", self.port, "must be a TCP port")
        if self.pool_timeout <= 0:
            raise InvalidSettingValueError("DB_POOL_TIMEOUT", self.pool_timeout, "must be > 0")

    def sqlalchemy_url(self) -> URL:
        """``DB_URL`` when set, else an asyncpg URL assembled from the parts."""
        if self.url:
            return make_url(self.url)
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )


@dataclasses.dataclass
class AppSettings(Settings):
    """HTTP server and bootstrap settings, read from ``APP_*`` variables."""

    _prefix: ClassVar[str] = "APP"

    env: str = "production"
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    create_schema: bool = False
    seed_sample_flags: bool = False
    cors_origins: list[str] = dataclasses.field(default_factory=list)

    def _validate(self) -> None:
        if self.env not in _ENVIRONMENTS:
            raise InvalidSettingValueError("APP_ENV", self.env, f"expected one of {_ENVIRONMENTS}")
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError("APP_PORT", self.port, "must be a TCP port")

    @property
    def debug(self) -> bool:
        return self.env == "development"


__all__ = ["AppSettings", "DatabaseSettings"]
