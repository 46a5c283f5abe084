"""Application feature flags – FeatureFlagService.

Validates raw request payloads, turns them into repository intents and maps
absence to :class:`~flagstore.kernel.errors.NotFoundError`.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flagstore.application.feature_flags.feature_flag import (
    MAX_FLAG_KEY_LENGTH,
    RESERVED_FLAG_KEYS,
    FeatureFlag,
    FeatureFlagPatch,
    NewFeatureFlag,
)
from flagstore.application.feature_flags.repository import FeatureFlagRepository
from flagstore.kernel.errors import NotFoundError, ValidationError
from flagstore.kernel.types import NOTHING, Option, Some, option_of

_RESOURCE = "Feature flag"


class FeatureFlagService:
    """Request-level contract built on a :class:`FeatureFlagRepository`."""

    def __init__(self, repository: FeatureFlagRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> FeatureFlagRepository:
        return self._repository

    async def list_flags(self, search: str | None = None) -> list[FeatureFlag]:
        term = search.strip() if search else None
        return await self._repository.list(term or None)

    async def list_enabled_flags(self) -> list[FeatureFlag]:
        return await self._repository.list_enabled()

    async def get_flag(self, flag_key: str) -> FeatureFlag:
        flag = await self._repository.get_by_key(flag_key)
        if flag is None:
            raise NotFoundError(_RESOURCE, flag_key)
        return flag

    async def get_flag_value(self, flag_key: str) -> Any:
        """``flag_data`` of an enabled flag; disabled flags read as missing."""
        flag = await self._repository.get_by_key(flag_key)
        if flag is None or not flag.enabled:
            raise NotFoundError(_RESOURCE, flag_key)
        return flag.flag_data

    async def create_flag(self, payload: Mapping[str, Any]) -> FeatureFlag:
        new = parse_new_flag(payload)
        return await self._repository.create(new)

    async def update_flag(self, flag_key: str, payload: Mapping[str, Any]) -> FeatureFlag:
        patch = parse_patch(payload)
        flag = await self._repository.update(flag_key, patch)
        if flag is None:
            raise NotFoundError(_RESOURCE, flag_key)
        return flag

    async def toggle_flag(self, flag_key: str) -> FeatureFlag:
        flag = await self._repository.toggle(flag_key)
        if flag is None:
            raise NotFoundError(_RESOURCE, flag_key)
        return flag

    async def delete_flag(self, flag_key: str) -> None:
        if not await self._repository.delete(flag_key):
            raise NotFoundError(_RESOURCE, flag_key)


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------

def parse_new_flag(payload: Mapping[str, Any]) -> NewFeatureFlag:
    """Validate a create payload; raises :class:`ValidationError`."""
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    errors: list[dict[str, Any]] = []
    flag_key = payload.get("flag_key")
    if flag_key is None or flag_key == "":
        raise ValidationError(
            "flag_key is required",
            errors=[{"field": "flag_key", "message": "required"}],
        )
    _check_flag_key(flag_key, errors)

    description = _description(option_of(payload, "description"), errors)
    enabled = _enabled(option_of(payload, "enabled"), errors)
    flag_data = _flag_data(option_of(payload, "flag_data"))
    if errors:
        raise ValidationError(_summary(errors), errors=errors)

    return NewFeatureFlag(
        flag_key=flag_key,
        description=description.unwrap_or(""),
        enabled=enabled.unwrap_or(False),
        flag_data=flag_data.unwrap_or({}),
    )


def parse_patch(payload: Mapping[str, Any]) -> FeatureFlagPatch:
    """Build a patch from the keys present in *payload*.

    ``flag_key`` is immutable and unknown keys are ignored. ``version`` is
    taken as the expected current version.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    errors: list[dict[str, Any]] = []
    description = _description(option_of(payload, "description"), errors)
    enabled = _enabled(option_of(payload, "enabled"), errors)
    flag_data = _flag_data(option_of(payload, "flag_data"))

    expected_version: Option[int] = NOTHING
    version = payload.get("version")
    if version is not None:
        if isinstance(version, bool) or not isinstance(version, int) or version < 1:
            errors.append({"field": "version", "message": "must be a positive integer"})
        else:
            expected_version = Some(version)

    if errors:
        raise ValidationError(_summary(errors), errors=errors)

    return FeatureFlagPatch(
        description=description,
        enabled=enabled,
        flag_data=flag_data,
        expected_version=expected_version,
    )


def _check_flag_key(flag_key: Any, errors: list[dict[str, Any]]) -> None:
    if not isinstance(flag_key, str):
        errors.append({"field": "flag_key", "message": "must be a string"})
    elif flag_key != flag_key.strip() or not flag_key.strip():
        errors.append({"field": "flag_key", "message": "must not be blank or padded with whitespace"})
    elif len(flag_key) > MAX_FLAG_KEY_LENGTH:
        errors.append({"field": "flag_key", "message": f"must be at most {MAX_FLAG_KEY_LENGTH} characters"})
    elif "/" in flag_key:
        # keys are single path segments in /feature-flags/{key}
        errors.append({"field": "flag_key", "message": "must not contain '/'"})
    elif flag_key in RESERVED_FLAG_KEYS:
        errors.append({"field": "flag_key", "message": f"'{flag_key}' is reserved"})


def _description(option: Option[Any], errors: list[dict[str, Any]]) -> Option[str]:
    if option.is_none():
        return option
    value = option.unwrap()
    if value is None:
        return Some("")
    if not isinstance(value, str):
        errors.append({"field": "description", "message": "must be a string"})
        return NOTHING
    return option


def _enabled(option: Option[Any], errors: list[dict[str, Any]]) -> Option[bool]:
    if option.is_none():
        return option
    if not isinstance(option.unwrap(), bool):
        errors.append({"field": "enabled", "message": "must be a boolean"})
        return NOTHING
    return option


def _flag_data(option: Option[Any]) -> Option[Any]:
    # flag_data is schema-less; only null is normalised.
    if option.is_some() and option.unwrap() is None:
        return Some({})
    return option


def _summary(errors: list[dict[str, Any]]) -> str:
    return "; ".join(f"{e['field']} {e['message']}" for e in errors)


__all__ = ["FeatureFlagService", "parse_new_flag", "parse_patch"]
