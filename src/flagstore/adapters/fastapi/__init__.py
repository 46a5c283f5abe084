"""FastAPI adapter – routers, envelope, exception mapper, middleware."""
from flagstore.adapters.fastapi.envelope import error_response, success_response
from flagstore.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from flagstore.adapters.fastapi.middleware import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)
from flagstore.adapters.fastapi.routers import FeatureFlagRouter, HealthRouter

__all__ = [
    "CorrelationIdMiddleware",
    "FastAPIExceptionMapper",
    "FeatureFlagRouter",
    "HealthRouter",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "UnhandledErrorMiddleware",
    "error_response",
    "success_response",
]
