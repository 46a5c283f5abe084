"""Observability – structured logging helpers."""
from flagstore.observability.logging.factory import JsonLoggerFactory
from flagstore.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, REDACTED, SensitiveFieldsFilter
from flagstore.observability.logging.processors import add_request_context, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "REDACTED",
    "SensitiveFieldsFilter",
    "add_request_context",
    "get_logger",
]
