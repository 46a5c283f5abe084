"""Observability – per-request correlation context.

The context lives in a ``ContextVar`` so that log lines emitted anywhere
below the HTTP middleware (service, repository) can be tied back to the
request that caused them.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from contextvars import ContextVar, Token
from uuid import uuid4

_CORRELATION_HEADERS = (b"x-correlation-id", b"x-request-id")


@dataclasses.dataclass(frozen=True, slots=True)
class RequestContext:
    correlation_id: str
    trace_id: str | None = None

    @classmethod
    def from_headers(cls, raw_headers: Iterable[tuple[bytes, bytes]]) -> RequestContext:
        """Build a context from raw ASGI ``(name, value)`` header pairs.

        ``X-Correlation-ID`` wins over ``X-Request-ID``; with neither present a
        UUID4 is generated. The trace id is the second field of a W3C
        ``traceparent`` header (``00-<trace-id>-<parent-id>-<flags>``).
        """
        found: dict[bytes, str] = {}
        for name, value in raw_headers:
            text = value.decode("latin-1").strip()
            if text:
                found.setdefault(name.lower(), text)

        correlation_id = next(
            (found[h] for h in _CORRELATION_HEADERS if h in found),
            None,
        ) or str(uuid4())

        trace_id = None
        parts = found.get(b"traceparent", "").split("-")
        if len(parts) >= 2 and parts[1]:
            trace_id = parts[1]
        return cls(correlation_id=correlation_id, trace_id=trace_id)


_current: ContextVar[RequestContext | None] = ContextVar("flagstore_request_context", default=None)


def bind_request_context(ctx: RequestContext) -> Token[RequestContext | None]:
    """Make *ctx* current; hand the token to :func:`reset_request_context` when done."""
    return _current.set(ctx)


def reset_request_context(token: Token[RequestContext | None]) -> None:
    _current.reset(token)


def current_request_context() -> RequestContext | None:
    return _current.get()


__all__ = [
    "RequestContext",
    "bind_request_context",
    "current_request_context",
    "reset_request_context",
]
