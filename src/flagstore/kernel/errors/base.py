"""Kernel errors – BaseError."""

from __future__ import annotations

from typing import Any


class BaseError(Exception):
    """Every error flagstore raises on purpose.

    ``code`` is a stable slug that clients and log queries can match on
    (it is echoed in the ``X-Error-Code`` response header). ``detail`` carries
    structured context such as the offending ``flag_key``; it is logged but
    never rendered into a response body.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Log-friendly view: ``code``, ``message``, ``detail`` and the cause's repr."""
        fields: dict[str, Any] = {"code": self.code, "message": self.message, "detail": self.detail}
        if self.__cause__ is not None:
            fields["cause"] = repr(self.__cause__)
        return fields


__all__ = ["BaseError"]
