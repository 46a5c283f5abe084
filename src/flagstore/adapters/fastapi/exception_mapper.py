"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from flagstore.adapters.fastapi.envelope import error_response
from flagstore.adapters.fastapi.middleware import UnhandledErrorMiddleware
from flagstore.adapters.sqlalchemy.errors import translate_store_error
from flagstore.kernel.errors import (
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from flagstore.observability.logging import get_logger

logger = get_logger(__name__)

_INTERNAL_ERROR = "Internal server error"


class FastAPIExceptionMapper:
    """Register error → HTTP status-code mappings on a FastAPI app.

    Every failure is rendered as ``{"success": false, "error": "..."}``.

    Mappings
    --------
    ``ValidationError`` / malformed body → 400
    ``NotFoundError``                    → 404
    ``ConflictError``                    → 409
    ``UnavailableError``                 → 503
    store ``IntegrityError``             → 409
    store ``DataError``                  → 400
    anything else                        → 500
    """

    def __init__(self, debug: bool = False) -> None:
        self._debug = debug
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[BaseError], int]] = [
            (ValidationError, 400),
            (NotFoundError, 404),
            (ConflictError, 409),
            (UnavailableError, 503),
            (InfrastructureError, 503),
            (DomainError, 422),
        ]

    def status_for(self, exc: BaseError) -> int:
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        app.add_exception_handler(BaseError, self._make_handler())
        app.add_exception_handler(RequestValidationError, self._request_validation_handler)
        app.add_exception_handler(StarletteHTTPException, self._http_exception_handler)
        app.add_exception_handler(SQLAlchemyError, self._store_error_handler)
        # Added before the app's other middleware, so it sits innermost and the
        # 500 envelope still passes through correlation and security headers.
        app.add_middleware(UnhandledErrorMiddleware, render=self.render_unexpected)

    def _make_handler(self) -> Callable[[Any, Any], Any]:
        def handler(request: Any, exc: BaseError) -> Any:  # noqa: ARG001
            return self.render(exc)

        return handler

    def render(self, exc: BaseError) -> Any:
        status = self.status_for(exc)
        if status >= 500:
            logger.error("request.failed", code=exc.code, error=exc.message)
        details = exc.errors if isinstance(exc, ValidationError) else None
        return error_response(exc.message, status_code=status, code=exc.code, details=details)

    def _request_validation_handler(self, request: Any, exc: RequestValidationError) -> Any:  # noqa: ARG002
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
                "message": err.get("msg", "invalid"),
            }
            for err in exc.errors()
        ]
        return self.render(ValidationError("Invalid request payload", errors=errors))

    def _http_exception_handler(self, request: Any, exc: StarletteHTTPException) -> Any:  # noqa: ARG002
        response = error_response(str(exc.detail), status_code=exc.status_code)
        for name, value in (exc.headers or {}).items():
            response.headers[name] = value
        return response

    def _store_error_handler(self, request: Any, exc: SQLAlchemyError) -> Any:  # noqa: ARG002
        translated = translate_store_error(exc)
        if translated is not None:
            return self.render(translated)
        return self.render_unexpected(exc)

    def render_unexpected(self, exc: Exception) -> Any:
        """500 envelope; the exception text is shown only in debug mode."""
        logger.exception("request.unhandled_exception", error_type=type(exc).__name__)
        error = (str(exc) or type(exc).__name__) if self._debug else _INTERNAL_ERROR
        return error_response(error, status_code=500, code="internal_error")


__all__ = ["FastAPIExceptionMapper"]
