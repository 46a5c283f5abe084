"""Kernel types – Option.

A patch needs to tell "field not sent" apart from "field sent as null", so
each patchable field is wrapped: ``Some(value)`` when the client supplied it,
``NOTHING`` when it did not.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Generic, NoReturn, TypeVar

T = TypeVar("T")


@dataclasses.dataclass(frozen=True, slots=True)
class Some(Generic[T]):
    value: T

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value


@dataclasses.dataclass(frozen=True, slots=True)
class Nothing(Generic[T]):
    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError("unwrap() called on an absent value")

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        return "NOTHING"


type Option[T] = Some[T] | Nothing[T]

NOTHING: Nothing[Any] = Nothing()


def option_of(mapping: Mapping[str, Any], key: str) -> Option[Any]:
    """``Some(mapping[key])`` if *key* is present (even when its value is ``None``)."""
    return Some(mapping[key]) if key in mapping else NOTHING


__all__ = ["NOTHING", "Nothing", "Option", "Some", "option_of"]
