"""Observability – redaction of secrets in log events."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {"password", "db_password", "secret", "token", "authorization", "cookie"}
)

REDACTED = "[REDACTED]"


class SensitiveFieldsFilter:
    """structlog processor masking sensitive keys at any depth.

    Keys are compared case-insensitively. Nested mappings and mappings inside
    lists are walked; other values are passed through untouched.
    """

    def __init__(self, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS) -> None:
        self._fields = frozenset(f.lower() for f in sensitive_fields)

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        return self.redact(event_dict)

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: REDACTED if k.lower() in self._fields else self._walk(v) for k, v in data.items()}

    def _walk(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.redact(value)
        if isinstance(value, list):
            return [self._walk(item) for item in value]
        return value


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "REDACTED", "SensitiveFieldsFilter"]
