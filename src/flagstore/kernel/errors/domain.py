"""Kernel errors – feature flag rule violations."""

from __future__ import annotations

from typing import Any

from flagstore.kernel.errors.base import BaseError

FieldError = dict[str, Any]


class DomainError(BaseError):
    default_code = "domain_error"


class ValidationError(DomainError):
    """A create/update payload was rejected.

    ``errors`` lists every offending field as ``{"field": ..., "message": ...}``
    so a client can fix them all in one round trip.
    """

    default_code = "invalid_payload"

    def __init__(self, message: str, *, errors: list[FieldError] | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[FieldError] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "errors": self.errors}


class NotFoundError(DomainError):
    """No flag is stored under the requested key."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        label = resource if identifier is None else f"{resource} '{identifier}'"
        super().__init__(f"{label} not found", **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """Duplicate ``flag_key`` on create, or a stale ``version`` on update."""

    default_code = "conflict"


__all__ = ["ConflictError", "DomainError", "FieldError", "NotFoundError", "ValidationError"]
