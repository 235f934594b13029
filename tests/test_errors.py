import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError
from app.core.errors import APIError, AIServiceError, classify_database_error, register_exception_handlers


class DriverError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


@pytest.fixture
def error_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/duplicate")
    async def duplicate():
        raise IntegrityError("INSERT", {}, DriverError("duplicate key value", pgcode="23505"))

    @app.get("/missing-parent")
    async def missing_parent():
        raise IntegrityError("INSERT", {}, DriverError("FOREIGN KEY constraint failed"))

    @app.get("/database-down")
    async def database_down():
        raise OperationalError("SELECT 1", {}, DriverError("connection refused"))

    @app.get("/ai")
    async def ai():
        raise AIServiceError("Failed to get AI response: timeout")

    @app.get("/too-large")
    async def too_large():
        raise APIError(413, "File too large", details={"limit": 10})

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    @app.get("/items/{item_id}")
    async def item(item_id: int):
        return {"id": item_id}

    return TestClient(app, raise_server_exceptions=False)


def test_unique_violation_maps_to_conflict(error_client):
    response = error_client.get("/duplicate")
    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "This record already exists", "code": "DUPLICATE_ENTRY"}


def test_foreign_key_violation_maps_to_bad_request(error_client):
    response = error_client.get("/missing-parent")
    assert response.status_code == 400
    assert response.json()["code"] == "FOREIGN_KEY_FAILURE"


def test_other_database_errors_are_internal(error_client):
    response = error_client.get("/database-down")
    assert response.status_code == 500
    assert response.json()["code"] == "DATABASE_ERROR"


def test_ai_service_error(error_client):
    response = error_client.get("/ai")
    assert response.status_code == 502
    assert response.json()["code"] == "AI_SERVICE_ERROR"


def test_api_error_carries_details(error_client):
    response = error_client.get("/too-large")
    assert response.status_code == 413
    assert response.json() == {
        "success": False,
        "message": "File too large",
        "code": "PAYLOAD_TOO_LARGE",
        "details": {"limit": 10},
    }


def test_unhandled_exception_is_internal_server_error(error_client):
    response = error_client.get("/crash")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "boom", "code": "INTERNAL_SERVER_ERROR"}


def test_validation_error_lists_paths(error_client):
    response = error_client.get("/items/abc")
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"][0]["path"] == "item_id"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_no_result_found_maps_to_not_found():
    status_code, body = classify_database_error(NoResultFound())
    assert status_code == 404
    assert body["code"] == "NOT_FOUND"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
