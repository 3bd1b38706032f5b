"""Test error handling functionality.

Verifies that custom exceptions carry the right status codes and that the
handlers turn them into the common error envelope.
"""
import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from core.error_handlers import create_error_response, format_validation_errors
from core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DatabaseError,
    DuplicateError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from database.store import create_store
from main import create_app
from services.meal_plan_service import MealPlanService
from tests.conftest import register


def test_exception_classes_have_proper_attributes():
    """Test that custom exceptions carry status codes and details."""
    exc = ValidationError("Bad value", field="value")
    assert exc.status_code == 400
    assert exc.details == {"fields": ["value"]}

    exc = DuplicateError("Username already taken", field="username")
    assert isinstance(exc, ValidationError)
    assert exc.details["fields"] == ["username"]

    assert AuthenticationError().status_code == 401
    assert AuthenticationError().message == "Not authenticated"

    exc = AuthorizationError("Reading", "update")
    assert exc.status_code == 403
    assert exc.message == "Not authorized to update this reading"

    exc = NotFoundError("Note", 42)
    assert exc.status_code == 404
    assert exc.details == {"resource": "Note", "id": 42}

    assert UpstreamError("down", provider="openai").details == {"provider": "openai"}
    assert DatabaseError("failed", operation="ping").status_code == 500
    assert ConfigurationError("bad", config_key="X").details == {"config_key": "X"}


def test_create_error_response_envelope():
    res = create_error_response("Nope", status_code=403, details={"resource": "Note"})
    assert res.status_code == 403
    body = json.loads(res.body)
    assert body == {"error": {"message": "Nope", "status_code": 403, "details": {"resource": "Note"}}}

    body = json.loads(create_error_response("Oops").body)
    assert "details" not in body["error"]


def test_format_validation_errors_strips_location_prefix():
    errors = [
        {"loc": ("body", "value"), "msg": "too small", "type": "greater_than_equal"},
        {"loc": ("query", "start"), "msg": "missing", "type": "missing"},
        {"loc": ("body",), "msg": "invalid json", "type": "json_invalid"},
    ]
    formatted = format_validation_errors(errors)
    assert [e["field"] for e in formatted] == ["value", "start", "body"]
    assert formatted[0]["message"] == "too small"


def test_unknown_storage_backend():
    with pytest.raises(ConfigurationError):
        create_store(backend="redis")


def test_health_endpoint(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "storage": "memory"}


def test_health_reports_storage_failure(memory_store, monkeypatch):
    def broken_ping():
        raise RuntimeError("disk gone")

    monkeypatch.setattr(memory_store, "ping", broken_ping)
    app = create_app(store=memory_store, meal_plan_service=MealPlanService(None), seed_demo=False)
    res = TestClient(app).get("/health")
    assert res.status_code == 500
    assert res.json()["error"]["details"] == {"operation": "ping"}


def test_malformed_json_body_is_400(client):
    res = client.post(
        "/api/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Invalid request data"


def failing_app(memory_store, monkeypatch, exc):
    """App whose reading listing raises `exc`, with a logged-in client."""
    app = create_app(store=memory_store, meal_plan_service=MealPlanService(None), seed_demo=False)
    client = TestClient(app, raise_server_exceptions=False)
    register(client, "hank")

    def broken_list(*args, **kwargs):
        raise exc

    monkeypatch.setattr(memory_store.readings, "list_by_user", broken_list)
    return client


def test_unexpected_error_is_generic_500(memory_store, monkeypatch):
    client = failing_app(memory_store, monkeypatch, RuntimeError("secret token in message"))
    res = client.get("/api/glucose")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["message"] == "An internal server error occurred"
    assert error["details"] == {"type": "internal_error"}
    assert "secret" not in res.text


def test_database_error_is_generic_500(memory_store, monkeypatch):
    exc = OperationalError("SELECT secret FROM glucose_readings", {}, Exception("secret"))
    client = failing_app(memory_store, monkeypatch, exc)
    res = client.get("/api/glucose")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["message"] == "A database error occurred"
    assert error["details"] == {"type": "database_error"}
    assert "secret" not in res.text


def test_default_app_uses_memory_store():
    from main import app

    assert app.state.store.backend == "memory"
    assert app.state.store.users.count() == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
