"""SQLAlchemy adapter – translation of store exceptions into the error taxonomy."""
from __future__ import annotations

import builtins

from sqlalchemy import exc as sa_exc

from flagstore.kernel.errors import BaseError, ConflictError, UnavailableError, ValidationError

_UNAVAILABLE = (
    sa_exc.TimeoutError,
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.DisconnectionError,
    builtins.TimeoutError,
    ConnectionError,
)


def translate_store_error(exc: BaseException) -> BaseError | None:
    """Map a store-level exception to a named error, or ``None`` if unclassified.

    * unique-constraint violation  → :class:`ConflictError`
    * malformed value (bad JSON)   → :class:`ValidationError`
    * pool timeout / lost server   → :class:`UnavailableError`
    """
    if isinstance(exc, BaseError):
        return exc
    if isinstance(exc, sa_exc.IntegrityError):
        return ConflictError("A feature flag with this key already exists", cause=exc)
    if isinstance(exc, sa_exc.DataError):
        return ValidationError("Invalid JSON format", cause=exc)
    if isinstance(exc, _UNAVAILABLE):
        return UnavailableError("database", cause=exc)
    return None


__all__ = ["translate_store_error"]
