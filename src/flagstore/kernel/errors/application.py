"""Application-layer errors."""

from __future__ import annotations

from flagstore.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern (configuration, bootstrap)."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
