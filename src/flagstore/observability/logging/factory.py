"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any

import structlog

from flagstore.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from flagstore.observability.logging.processors import add_request_context

# uvicorn installs its own handlers unless log_config=None; route them to root.
_FOREIGN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine")


class JsonLoggerFactory:
    """One-shot setup: structlog and stdlib ``logging`` both render JSON lines to stderr."""

    @staticmethod
    def configure(
        level: int | str = logging.INFO,
        sensitive_fields: Iterable[str] | None = DEFAULT_SENSITIVE_FIELDS,
    ) -> None:
        numeric_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        chain: list[Any] = [
            structlog.contextvars.merge_contextvars,
            add_request_context,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
        if sensitive_fields:
            chain.append(SensitiveFieldsFilter(sensitive_fields))

        structlog.configure(
            processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=chain,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )
        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(numeric_level)
        for name in _FOREIGN_LOGGERS:
            foreign = logging.getLogger(name)
            foreign.handlers.clear()
            foreign.propagate = True


__all__ = ["JsonLoggerFactory"]
