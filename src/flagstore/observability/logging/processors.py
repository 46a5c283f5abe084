"""Observability – structlog processors and the ``get_logger`` helper."""
from __future__ import annotations

from typing import Any

import structlog

from flagstore.observability.correlation import current_request_context


def add_request_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
    """Stamp ``correlation_id`` (and ``trace_id`` when known) on every event.

    Values already present on the event are left alone.
    """
    ctx = current_request_context()
    if ctx is None:
        return event_dict
    event_dict.setdefault("correlation_id", ctx.correlation_id)
    if ctx.trace_id:
        event_dict.setdefault("trace_id", ctx.trace_id)
    return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger named *name* with *initial_values* bound."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger


__all__ = ["add_request_context", "get_logger"]
