"""
Error handling and edge case tests.

Every failure answers with the same body:
    {"success": false, "error": {"code", "message", "details"?}, "timestamp"}

This suite covers:
- Domain errors mapped to their HTTP status
- Request validation errors (422)
- Unknown routes and unsupported methods
- Request id propagation
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from test_fixtures import client, auth_headers, make_tenant, make_user
from app.exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
    UnauthorizedError,
)
from main import app


def _assert_error_body(response, status_code: int, code: str):
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    assert body["error"]["message"]
    assert "timestamp" in body
    return body


# =============================================================================
# EXCEPTION CLASSES
# =============================================================================


@pytest.mark.parametrize(
    "error_cls, status_code, code",
    [
        (ServiceValidationError, 400, "SERVICE_VALIDATION_ERROR"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (ForbiddenError, 403, "FORBIDDEN"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
    ],
)
def test_error_defaults(error_cls, status_code, code):
    error = error_cls()
    assert error.http_status == status_code
    assert error.to_dict() == {"code": code, "message": error_cls.default_message}


def test_error_carries_details_and_custom_code():
    error = ConflictError("Taken", details={"field": "code_name"}, code="DUPLICATE_CODE_NAME")
    assert str(error) == "Taken"
    assert error.to_dict() == {
        "code": "DUPLICATE_CODE_NAME",
        "message": "Taken",
        "details": {"field": "code_name"},
    }
    assert isinstance(error, AppError)


# =============================================================================
# HTTP RESPONSES
# =============================================================================


def test_not_found_body():
    owner, company_id = make_tenant()
    r = client.get(
        f"/companies/{company_id}/ingredients/{uuid.uuid4()}", headers=auth_headers(owner)
    )
    _assert_error_body(r, 404, "NOT_FOUND")


def test_unauthorized_body():
    r = client.get("/users/me")
    _assert_error_body(r, 401, "UNAUTHORIZED")


def test_validation_error_body():
    """
    Verifies:
    - Malformed path parameters answer 422
    - Field errors are listed in details
    """
    user = make_user()
    r = client.get("/companies/not-a-uuid", headers=auth_headers(user))
    body = _assert_error_body(r, 422, "VALIDATION_ERROR")
    assert isinstance(body["error"]["details"], list)

    owner, company_id = make_tenant()
    r = client.post(
        f"/companies/{company_id}/ingredients",
        json={"name": "Rice", "package_amount": 0, "unit": "g", "price": 1},
        headers=auth_headers(owner),
    )
    body = _assert_error_body(r, 422, "VALIDATION_ERROR")
    assert any("package_amount" in d["loc"] for d in body["error"]["details"])


def test_unknown_route_and_method():
    r = client.get("/no-such-route")
    _assert_error_body(r, 404, "HTTP_404")

    r = client.put("/health-check")
    _assert_error_body(r, 405, "HTTP_405")


def test_unexpected_error_hides_details(monkeypatch):
    from services.user_service import UserService

    def boom(db, term):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(UserService, "search", staticmethod(boom))
    user = make_user()
    quiet_client = TestClient(app, raise_server_exceptions=False)
    r = quiet_client.get("/users/search?q=ann", headers=auth_headers(user))
    body = _assert_error_body(r, 500, "INTERNAL_SERVER_ERROR")
    assert "exploded" not in body["error"]["message"]


# =============================================================================
# REQUEST ID
# =============================================================================


def test_request_id_generated_and_echoed():
    r = client.get("/health-check")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "FoodOps"}
    assert r.headers["X-Request-ID"]
    assert "X-Process-Time" in r.headers

    r = client.get("/health-check", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
