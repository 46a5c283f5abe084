"""FastAPI adapter – uniform ``{success, data, error, message}`` response envelope."""
from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

_UNSET: Any = object()


def success_response(
    data: Any = _UNSET,
    *,
    message: str | None = None,
    status_code: int = 200,
) -> JSONResponse:
    """``{"success": true, "data"?: ..., "message"?: ...}``."""
    body: dict[str, Any] = {"success": True}
    if data is not _UNSET:
        body["data"] = jsonable_encoder(data)
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


def error_response(
    error: str,
    *,
    status_code: int,
    code: str | None = None,
    message: str | None = None,
    details: Any = None,
) -> JSONResponse:
    """``{"success": false, "error": ..., "message"?: ...}``.

    *code* is echoed in the ``X-Error-Code`` header for request logs.
    """
    body: dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        body["message"] = message
    if details:
        body["details"] = jsonable_encoder(details)
    response = JSONResponse(status_code=status_code, content=body)
    if code:
        response.headers["X-Error-Code"] = code
    return response


__all__ = ["error_response", "success_response"]
