"""FastAPI adapter – feature flag and health routers."""
from __future__ import annotations

from typing import Annotated, Any, Awaitable, Callable

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from flagstore.adapters.fastapi.deps import get_flag_service
from flagstore.adapters.fastapi.envelope import success_response
from flagstore.application.feature_flags import FeatureFlagService

FlagService = Annotated[FeatureFlagService, Depends(get_flag_service)]
JsonBody = Annotated[dict[str, Any], Body()]

ReadinessCheck = Callable[[], Awaitable[bool]]


def FeatureFlagRouter(prefix: str = "/feature-flags", tags: list[str] | None = None) -> APIRouter:
    """Return the CRUD + toggle router for feature flags.

    Every response is wrapped in the ``{success, data, error, message}``
    envelope; failures are rendered by :class:`FastAPIExceptionMapper`.
    """
    router = APIRouter(prefix=prefix, tags=tags or ["feature-flags"])

    @router.get("")
    async def list_flags(
        service: FlagService,
        search: Annotated[str | None, Query(description="Substring of flag_key or description")] = None,
    ) -> JSONResponse:
        flags = await service.list_flags(search)
        return success_response([f.to_dict() for f in flags])

    @router.get("/enabled")
    async def list_enabled_flags(service: FlagService) -> JSONResponse:
        flags = await service.list_enabled_flags()
        return success_response([f.to_dict() for f in flags])

    @router.get("/{key}")
    async def get_flag(key: str, service: FlagService) -> JSONResponse:
        flag = await service.get_flag(key)
        return success_response(flag.to_dict())

    @router.get("/{key}/value")
    async def get_flag_value(key: str, service: FlagService) -> JSONResponse:
        """``flag_data`` of an enabled flag; 404 when missing or disabled."""
        return success_response(await service.get_flag_value(key))

    @router.post("", status_code=201)
    async def create_flag(payload: JsonBody, service: FlagService) -> JSONResponse:
        flag = await service.create_flag(payload)
        return success_response(flag.to_dict(), status_code=201)

    @router.put("/{key}")
    async def update_flag(key: str, payload: JsonBody, service: FlagService) -> JSONResponse:
        flag = await service.update_flag(key, payload)
        return success_response(flag.to_dict())

    @router.patch("/{key}/toggle")
    async def toggle_flag(key: str, service: FlagService) -> JSONResponse:
        flag = await service.toggle_flag(key)
        return success_response(flag.to_dict())

    @router.delete("/{key}")
    async def delete_flag(key: str, service: FlagService) -> JSONResponse:
        await service.delete_flag(key)
        return success_response(message=f"Feature flag '{key}' deleted successfully")

    return router


def HealthRouter(
    path: str = "/health",
    readiness_checks: list[ReadinessCheck] | None = None,
    tags: list[str] | None = None,
) -> APIRouter:
    """Return a liveness + readiness health-check router.

    Liveness is at ``{path}/live``; readiness at ``{path}/ready`` returns 503
    unless every check returns ``True``.
    """
    router = APIRouter(tags=tags or ["ops"])
    checks = readiness_checks or []

    @router.get(f"{path}/live")
    async def liveness() -> dict[str, str]:
        return {"status": "ok"}

    @router.get(f"{path}/ready")
    async def readiness() -> JSONResponse:
        results: dict[str, bool] = {}
        for check in checks:
            name = getattr(check, "__name__", repr(check))
            results[name] = await check()
        all_ok = all(results.values())
        return JSONResponse(
            status_code=200 if all_ok else 503,
            content={"status": "healthy" if all_ok else "unhealthy", "checks": results},
        )

    return router


__all__ = ["FeatureFlagRouter", "HealthRouter", "ReadinessCheck"]
