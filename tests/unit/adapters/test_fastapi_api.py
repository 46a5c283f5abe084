"""Unit tests for the FastAPI surface: routes, envelope, error mapping, middleware."""
from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import exc as sa_exc

from flagstore.adapters.fastapi import FastAPIExceptionMapper, error_response, success_response
from flagstore.app import create_app
from flagstore.application.feature_flags import FeatureFlag, InMemoryFeatureFlagRepository
from flagstore.config import AppSettings, DatabaseSettings
from flagstore.kernel.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from flagstore.kernel.time import FrozenClock

T0 = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


def _client(
    repository: Any = None,
    *,
    env: str = "test",
    raise_server_exceptions: bool = True,
    **settings: Any,
) -> TestClient:
    app = create_app(
        AppSettings(env=env, **settings),
        repository=repository or InMemoryFeatureFlagRepository(clock=FrozenClock(T0)),
    )
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


class _BrokenRepository(InMemoryFeatureFlagRepository):
    def __init__(self, exc: BaseException) -> None:
        super().__init__()
        self._exc = exc

    async def list(self, search: str | None = None) -> list[FeatureFlag]:
        raise self._exc

    async def ping(self) -> bool:
        return False


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


class TestEnvelope:
    def test_success_with_data(self) -> None:
        response = success_response({"a": 1})
        assert response.status_code == 200
        assert response.body == b'{"success":true,"data":{"a":1}}'

    def test_success_message_only(self) -> None:
        response = success_response(message="done")
        assert response.body == b'{"success":true,"message":"done"}'

    def test_success_with_null_data(self) -> None:
        assert success_response(None).body == b'{"success":true,"data":null}'

    def test_error_sets_code_header(self) -> None:
        response = error_response("nope", status_code=404, code="not_found")
        assert response.status_code == 404
        assert response.headers["X-Error-Code"] == "not_found"
        assert response.body == b'{"success":false,"error":"nope"}'


# ---------------------------------------------------------------------------
# Exception mapper
# ---------------------------------------------------------------------------


class TestFastAPIExceptionMapper:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationError("bad"), 400),
            (NotFoundError("Feature flag", "k"), 404),
            (ConflictError("dup"), 409),
            (UnavailableError(), 503),
            (DomainError("rule"), 422),
        ],
    )
    def test_status_for(self, error: Any, status: int) -> None:
        assert FastAPIExceptionMapper().status_for(error) == status

    def test_store_errors_mapped_without_classification(self) -> None:
        app = FastAPI()
        FastAPIExceptionMapper().register(app)

        @app.get("/dup")
        async def dup() -> None:
            raise sa_exc.IntegrityError("INSERT", {}, Exception("duplicate key value"))

        @app.get("/bad-json")
        async def bad_json() -> None:
            raise sa_exc.DataError("INSERT", {}, Exception("invalid input syntax for type json"))

        client = TestClient(app)
        dup_response = client.get("/dup")
        assert dup_response.status_code == 409
        assert dup_response.json()["success"] is False
        bad = client.get("/bad-json")
        assert bad.status_code == 400
        assert bad.json() == {"success": False, "error": "Invalid JSON format"}


# ---------------------------------------------------------------------------
# Routes over the in-memory repository
# ---------------------------------------------------------------------------


class TestFeatureFlagRoutes:
    def test_end_to_end_scenario(self) -> None:
        with _client() as client:
            created = client.post(
                "/feature-flags", json={"flag_key": "beta-ui", "flag_data": {"value": 42}}
            )
            assert created.status_code == 201
            body = created.json()
            assert body["success"] is True
            assert body["data"]["enabled"] is False
            assert body["data"]["description"] == ""
            assert body["data"]["flag_data"] == {"value": 42}

            toggled = client.patch("/feature-flags/beta-ui/toggle")
            assert toggled.status_code == 200
            assert toggled.json()["data"]["enabled"] is True

            updated = client.put("/feature-flags/beta-ui", json={"flag_data": {"value": 99}})
            assert updated.status_code == 200
            assert updated.json()["data"]["enabled"] is True
            assert updated.json()["data"]["flag_data"] == {"value": 99}

            deleted = client.delete("/feature-flags/beta-ui")
            assert deleted.status_code == 200
            assert deleted.json() == {
                "success": True,
                "message": "Feature flag 'beta-ui' deleted successfully",
            }

            missing = client.get("/feature-flags/beta-ui")
            assert missing.status_code == 404
            assert missing.json() == {"success": False, "error": "Feature flag 'beta-ui' not found"}

    def test_list_and_search(self) -> None:
        with _client() as client:
            client.post("/feature-flags", json={"flag_key": "dark-mode"})
            client.post("/feature-flags", json={"flag_key": "beta-ui", "description": "dark-mode aware"})
            client.post("/feature-flags", json={"flag_key": "checkout"})

            everything = client.get("/feature-flags").json()["data"]
            assert [f["flag_key"] for f in everything] == ["beta-ui", "checkout", "dark-mode"]

            found = client.get("/feature-flags", params={"search": "Dark-Mode"}).json()["data"]
            assert [f["flag_key"] for f in found] == ["beta-ui", "dark-mode"]

            assert client.get("/feature-flags", params={"search": "zzz"}).json() == {
                "success": True,
                "data": [],
            }

    def test_enabled_route_not_shadowed_by_key(self) -> None:
        with _client() as client:
            client.post("/feature-flags", json={"flag_key": "on", "enabled": True})
            client.post("/feature-flags", json={"flag_key": "off"})
            data = client.get("/feature-flags/enabled").json()["data"]
            assert [f["flag_key"] for f in data] == ["on"]

    def test_get_returns_full_record(self) -> None:
        with _client() as client:
            client.post("/feature-flags", json={"flag_key": "beta-ui", "description": "New UI"})
            data = client.get("/feature-flags/beta-ui").json()["data"]
            assert data["flag_key"] == "beta-ui"
            assert data["description"] == "New UI"
            assert data["version"] == 1
            assert data["created_at"] == T0.isoformat()
            assert data["updated_at"] == T0.isoformat()

    def test_flag_value(self) -> None:
        with _client() as client:
            client.post("/feature-flags", json={"flag_key": "limit", "flag_data": {"value": 42}})
            assert client.get("/feature-flags/limit/value").status_code == 404
            client.patch("/feature-flags/limit/toggle")
            assert client.get("/feature-flags/limit/value").json() == {
                "success": True,
                "data": {"value": 42},
            }

    def test_missing_flag_key(self) -> None:
        with _client() as client:
            response = client.post("/feature-flags", json={"description": "no key"})
            assert response.status_code == 400
            body = response.json()
            assert body["success"] is False
            assert body["error"] == "flag_key is required"
            assert response.headers["X-Error-Code"] == "invalid_payload"

    def test_wrong_field_types(self) -> None:
        with _client() as client:
            response = client.post("/feature-flags", json={"flag_key": "k", "enabled": "yes"})
            assert response.status_code == 400
            assert response.json()["details"] == [{"field": "enabled", "message": "must be a boolean"}]

    def test_malformed_body(self) -> None:
        with _client() as client:
            response = client.post(
                "/feature-flags",
                content=b'{"flag_key": ',
                headers={"Content-Type": "application/json"},
            )
            assert response.status_code == 400
            assert response.json()["success"] is False

    def test_non_object_body(self) -> None:
        with _client() as client:
            response = client.post("/feature-flags", json=["beta-ui"])
            assert response.status_code == 400

    @pytest.mark.parametrize("flag_key", ["team/beta", "enabled"])
    def test_unaddressable_key_rejected(self, flag_key: str) -> None:
        with _client() as client:
            response = client.post("/feature-flags", json={"flag_key": flag_key})
            assert response.status_code == 400
            assert response.json()["details"][0]["field"] == "flag_key"
            assert client.get("/feature-flags").json()["data"] == []

    def test_duplicate_create(self) -> None:
        with _client() as client:
            assert client.post("/feature-flags", json={"flag_key": "beta-ui"}).status_code == 201
            response = client.post("/feature-flags", json={"flag_key": "beta-ui"})
            assert response.status_code == 409
            assert response.json() == {
                "success": False,
                "error": "Feature flag 'beta-ui' already exists",
            }

    def test_update_missing(self) -> None:
        with _client() as client:
            assert client.put("/feature-flags/nope", json={"enabled": True}).status_code == 404

    def test_update_with_empty_body_is_noop(self) -> None:
        with _client() as client:
            created = client.post("/feature-flags", json={"flag_key": "beta-ui"}).json()["data"]
            same = client.put("/feature-flags/beta-ui", json={}).json()["data"]
            assert same == created

    def test_update_stale_version(self) -> None:
        with _client() as client:
            client.post("/feature-flags", json={"flag_key": "beta-ui"})
            assert client.put(
                "/feature-flags/beta-ui", json={"description": "x", "version": 1}
            ).status_code == 200
            stale = client.put("/feature-flags/beta-ui", json={"description": "y", "version": 1})
            assert stale.status_code == 409

    def test_toggle_missing(self) -> None:
        with _client() as client:
            assert client.patch("/feature-flags/nope/toggle").status_code == 404

    def test_delete_missing(self) -> None:
        with _client() as client:
            response = client.delete("/feature-flags/nope")
            assert response.status_code == 404
            assert response.json()["error"] == "Feature flag 'nope' not found"

    def test_unknown_route_uses_envelope(self) -> None:
        with _client() as client:
            response = client.get("/nowhere")
            assert response.status_code == 404
            assert response.json()["success"] is False

    def test_seed_on_startup(self) -> None:
        with _client(seed_sample_flags=True) as client:
            keys = [f["flag_key"] for f in client.get("/feature-flags").json()["data"]]
            assert keys == ["a-boolean-flag", "a-json-flag", "a-number-flag", "a-string-flag"]


# ---------------------------------------------------------------------------
# Internal errors
# ---------------------------------------------------------------------------


class TestInternalErrors:
    def test_unexpected_error_hides_detail(self) -> None:
        repo = _BrokenRepository(RuntimeError("connection string leaked"))
        with _client(repo, env="production") as client:
            response = client.get("/feature-flags", headers={"X-Correlation-ID": "req-500"})
            assert response.status_code == 500
            assert response.json() == {"success": False, "error": "Internal server error"}
            assert response.headers["X-Error-Code"] == "internal_error"

    def test_unexpected_error_keeps_middleware_headers(self) -> None:
        with _client(_BrokenRepository(RuntimeError("boom"))) as client:
            response = client.get("/feature-flags", headers={"X-Correlation-ID": "req-500"})
            assert response.status_code == 500
            assert response.headers["X-Correlation-ID"] == "req-500"
            assert response.headers["X-Content-Type-Options"] == "nosniff"
            assert response.headers["X-Frame-Options"] == "DENY"

    def test_unclassified_store_error_is_internal(self) -> None:
        repo = _BrokenRepository(sa_exc.ProgrammingError("SELECT", {}, Exception("syntax error")))
        with _client(repo) as client:
            response = client.get("/feature-flags")
            assert response.status_code == 500
            assert response.json()["error"] == "Internal server error"

    def test_development_exposes_detail(self) -> None:
        repo = _BrokenRepository(RuntimeError("boom"))
        with _client(repo, env="development", raise_server_exceptions=False) as client:
            response = client.get("/feature-flags")
            assert response.status_code == 500
            assert response.json()["error"] == "boom"

    def test_unavailable_store(self) -> None:
        with _client(_BrokenRepository(UnavailableError())) as client:
            response = client.get("/feature-flags")
            assert response.status_code == 503
            assert response.json() == {"success": False, "error": "'database' is unavailable"}


# ---------------------------------------------------------------------------
# Health and middleware
# ---------------------------------------------------------------------------


class TestHealth:
    def test_live(self) -> None:
        with _client() as client:
            assert client.get("/health/live").json() == {"status": "ok"}

    def test_ready(self) -> None:
        with _client() as client:
            response = client.get("/health/ready")
            assert response.status_code == 200
            assert response.json() == {"status": "healthy", "checks": {"database": True}}

    def test_not_ready_when_store_down(self) -> None:
        with _client(_BrokenRepository(RuntimeError())) as client:
            response = client.get("/health/ready")
            assert response.status_code == 503
            assert response.json()["status"] == "unhealthy"


class TestMiddleware:
    def test_correlation_id_echoed(self) -> None:
        with _client() as client:
            response = client.get("/health/live", headers={"X-Correlation-ID": "abc-123"})
            assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_correlation_id_generated(self) -> None:
        with _client() as client:
            assert client.get("/health/live").headers["X-Correlation-ID"]

    def test_security_headers(self) -> None:
        with _client() as client:
            headers = client.get("/feature-flags").headers
            assert headers["X-Content-Type-Options"] == "nosniff"
            assert headers["X-Frame-Options"] == "DENY"
            assert headers["Referrer-Policy"] == "no-referrer"

    def test_cors_when_configured(self) -> None:
        with _client(cors_origins=["http://ui.test"]) as client:
            response = client.options(
                "/feature-flags",
                headers={"Origin": "http://ui.test", "Access-Control-Request-Method": "POST"},
            )
            assert response.headers["access-control-allow-origin"] == "http://ui.test"


# ---------------------------------------------------------------------------
# Full stack over SQLite
# ---------------------------------------------------------------------------


class TestSqlBackedApp:
    def _app(self, tmp_path: Path) -> FastAPI:
        return create_app(
            AppSettings(env="test", create_schema=True),
            DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"),
            clock=FrozenClock(T0),
        )

    def test_end_to_end_scenario(self, tmp_path: Path) -> None:
        with TestClient(self._app(tmp_path)) as client:
            created = client.post(
                "/feature-flags", json={"flag_key": "beta-ui", "flag_data": {"value": 42}}
            )
            assert created.status_code == 201
            assert created.json()["data"]["enabled"] is False

            assert client.patch("/feature-flags/beta-ui/toggle").json()["data"]["enabled"] is True

            updated = client.put("/feature-flags/beta-ui", json={"flag_data": {"value": 99}}).json()
            assert updated["data"]["enabled"] is True
            assert updated["data"]["flag_data"] == {"value": 99}
            assert updated["data"]["version"] == 3

            assert client.delete("/feature-flags/beta-ui").status_code == 200
            assert client.get("/feature-flags/beta-ui").status_code == 404

    def test_duplicate_is_conflict(self, tmp_path: Path) -> None:
        with TestClient(self._app(tmp_path)) as client:
            client.post("/feature-flags", json={"flag_key": "beta-ui"})
            assert client.post("/feature-flags", json={"flag_key": "beta-ui"}).status_code == 409

    def test_ready(self, tmp_path: Path) -> None:
        with TestClient(self._app(tmp_path)) as client:
            assert client.get("/health/ready").status_code == 200
