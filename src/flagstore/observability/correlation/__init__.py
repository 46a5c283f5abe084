"""Observability – request correlation."""
from flagstore.observability.correlation.context import (
    RequestContext,
    bind_request_context,
    current_request_context,
    reset_request_context,
)

__all__ = [
    "RequestContext",
    "bind_request_context",
    "current_request_context",
    "reset_request_context",
]
