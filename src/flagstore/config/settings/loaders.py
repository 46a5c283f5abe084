"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from dotenv import load_dotenv

from flagstore.config.settings.base import Settings
from flagstore.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

S = TypeVar("S", bound=Settings)


def _to_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError("expected a boolean (true/false, yes/no, 1/0)")


def _to_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


# Keyed by the annotation text; settings modules use ``from __future__ import annotations``.
_COERCERS: dict[str, Callable[[str], Any]] = {
    "bool": _to_bool,
    "int": int,
    "float": float,
    "list[str]": _to_list,
    "str": str,
}


class SettingsLoader(abc.ABC):
    @abc.abstractmethod
    def load(self, settings_class: type[S]) -> S: ...


class EnvSettingsLoader(SettingsLoader):
    """Fill a :class:`Settings` dataclass from ``<PREFIX>_<FIELD>`` variables.

    Unset variables fall back to the field default. *environ* replaces
    ``os.environ`` (tests pass a plain dict).
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[S]) -> S:
        environ = os.environ if self._environ is None else self._environ
        values: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):
            env_var = settings_class.env_var(field.name)
            if env_var in environ:
                values[field.name] = self._coerce(env_var, environ[env_var], field.type)
            elif field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
                raise MissingRequiredSettingError(env_var)
        try:
            return settings_class(**values)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Cannot build {settings_class.__name__}: {exc}") from exc

    @staticmethod
    def _coerce(env_var: str, raw: str, annotation: Any) -> Any:
        name = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", "str")
        coerce = _COERCERS.get(name, str)
        try:
            return coerce(raw)
        except ValueError as exc:
            raise InvalidSettingValueError(env_var, raw, str(exc)) from None


class DotenvSettingsLoader(SettingsLoader):
    """Read ``.env`` into the process environment first, then load as :class:`EnvSettingsLoader`.

    Variables already set in the environment win unless *override* is true.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[S]) -> S:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
