"""FastAPI adapter – dependency functions."""
from __future__ import annotations

from fastapi import Request

from flagstore.application.feature_flags import FeatureFlagService


def get_flag_service(request: Request) -> FeatureFlagService:
    """The service built during app startup and kept on ``app.state``."""
    return request.app.state.flag_service


__all__ = ["get_flag_service"]
