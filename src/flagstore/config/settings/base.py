"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base for environment-driven settings dataclasses.

    Each field ``name`` of a subclass with ``_prefix = "DB"`` is read from
    ``DB_NAME``. Subclasses override :meth:`_validate` for range checks;
    it runs on construction, so an invalid instance never exists.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        pass

    @classmethod
    def env_var(cls, field_name: str) -> str:
        return f"{cls._prefix}_{field_name}".upper() if cls._prefix else field_name.upper()


__all__ = ["Settings"]
