"""Unit tests for the kernel error hierarchy."""
from __future__ import annotations

import pytest

from flagstore.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)


class TestBaseError:
    def test_default_code(self) -> None:
        err = BaseError("boom")
        assert err.code == "base_error"
        assert err.message == "boom"
        assert str(err) == "boom"

    def test_custom_code_and_detail(self) -> None:
        err = BaseError("boom", code="custom", detail={"k": 1})
        assert err.to_dict() == {"code": "custom", "message": "boom", "detail": {"k": 1}}

    def test_cause_is_chained(self) -> None:
        original = RuntimeError("db down")
        err = BaseError("wrapped", cause=original)
        assert err.__cause__ is original
        assert err.cause is original
        assert err.to_dict()["cause"] == "RuntimeError('db down')"

    def test_repr(self) -> None:
        assert repr(ConflictError("dup")) == "ConflictError(code='conflict', message='dup')"


class TestHierarchy:
    @pytest.mark.parametrize(
        ("error", "parent"),
        [
            (ValidationError("x"), DomainError),
            (NotFoundError("Feature flag"), DomainError),
            (ConflictError("x"), DomainError),
            (UnavailableError(), InfrastructureError),
            (ApplicationError("x"), BaseError),
        ],
    )
    def test_parents(self, error: BaseError, parent: type[BaseError]) -> None:
        assert isinstance(error, parent)
        assert isinstance(error, BaseError)


class TestNotFoundError:
    def test_message_with_identifier(self) -> None:
        err = NotFoundError("Feature flag", "beta-ui")
        assert err.message == "Feature flag 'beta-ui' not found"
        assert err.identifier == "beta-ui"
        assert err.code == "not_found"

    def test_message_without_identifier(self) -> None:
        assert NotFoundError("Feature flag").message == "Feature flag not found"


class TestValidationError:
    def test_code_is_invalid_payload(self) -> None:
        assert ValidationError("bad").code == "invalid_payload"

    def test_errors_serialised(self) -> None:
        err = ValidationError("bad", errors=[{"field": "flag_key", "message": "required"}])
        assert err.to_dict()["errors"] == [{"field": "flag_key", "message": "required"}]


class TestUnavailableError:
    def test_default_message(self) -> None:
        err = UnavailableError()
        assert err.message == "'database' is unavailable"
        assert err.resource == "database"
        assert err.code == "unavailable"
