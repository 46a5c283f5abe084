"""Kernel errors – store failures."""

from __future__ import annotations

from typing import Any

from flagstore.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    default_code = "infrastructure_error"


class UnavailableError(InfrastructureError):
    """No connection could be obtained from the pool, or the server went away.

    Callers may retry; the repository itself never does.
    """

    default_code = "unavailable"

    def __init__(self, resource: str = "database", message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"'{resource}' is unavailable", **kwargs)
        self.resource = resource


__all__ = ["InfrastructureError", "UnavailableError"]
