"""FastAPI adapter – raw ASGI middleware for the flag API.

* :class:`CorrelationIdMiddleware`  – resolves and echoes ``X-Correlation-ID``
* :class:`RequestLoggingMiddleware` – one ``http.request`` line per request
* :class:`SecurityHeadersMiddleware` – conservative browser hardening headers
* :class:`UnhandledErrorMiddleware` – 500 envelope for exceptions no handler claimed
"""
from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from flagstore.observability.correlation import (
    RequestContext,
    bind_request_context,
    reset_request_context,
)
from flagstore.observability.logging import get_logger

if TYPE_CHECKING:
    from starlette.responses import Response
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger("flagstore.http")


class CorrelationIdMiddleware:
    def __init__(self, app: "ASGIApp", header_name: str = "X-Correlation-ID") -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = RequestContext.from_headers(scope.get("headers", []))
        token = bind_request_context(ctx)
        bound = structlog.contextvars.bind_contextvars(correlation_id=ctx.correlation_id)

        async def send_wrapper(message: "Message") -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[self.header_name] = ctx.correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            structlog.contextvars.reset_contextvars(**bound)
            reset_request_context(token)


class RequestLoggingMiddleware:
    """Log method, path, status, latency and the ``X-Error-Code`` of failures.

    5xx responses (and requests that raised before responding) are logged
    at warning, everything else at info.
    """

    def __init__(self, app: "ASGIApp") -> None:
        self.app = app

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        outcome: dict[str, object] = {"status_code": 500, "error_code": None}

        async def send_wrapper(message: "Message") -> None:
            if message["type"] == "http.response.start":
                outcome["status_code"] = message["status"]
                outcome["error_code"] = MutableHeaders(scope=message).get("x-error-code")
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            status_code = outcome["status_code"]
            emit = logger.warning if isinstance(status_code, int) and status_code >= 500 else logger.info
            emit(
                "http.request",
                method=scope.get("method"),
                path=scope.get("path"),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **outcome,
            )


_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


class SecurityHeadersMiddleware:
    """Add :data:`_SECURITY_HEADERS` to responses that do not set them already."""

    def __init__(self, app: "ASGIApp") -> None:
        self.app = app

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message: "Message") -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in _SECURITY_HEADERS.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_wrapper)


class UnhandledErrorMiddleware:
    """Turn an exception that escaped every handler into *render(exc)*.

    Registered innermost, so the response passes back out through the
    correlation and security-header middleware. An exception raised after
    the response started is re-raised.
    """

    def __init__(self, app: "ASGIApp", render: Callable[[Exception], "Response"]) -> None:
        self.app = app
        self.render = render

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message: "Message") -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if started:
                raise
            response: Any = self.render(exc)
            await response(scope, receive, send)


__all__ = [
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "UnhandledErrorMiddleware",
]
