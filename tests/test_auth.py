from datetime import timedelta
from app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from app.models.user import UserRole


def test_register_creates_analyst_and_returns_token(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["token"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "analyst"
    assert data["user"]["permissions"] == ["read:documents", "upload:documents", "use:ai"]
    assert "passwordHash" not in data["user"]


def test_register_duplicate_email_conflicts(client, analyst):
    response = client.post(
        "/api/auth/register",
        json={"email": analyst.email, "password": "password123", "name": "Again"},
    )
    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "DUPLICATE_ENTRY"


def test_register_rejects_short_password(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "short@example.com", "password": "short", "name": "Short"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert any(detail["path"] == "password" for detail in body["details"])


def test_login_returns_user_with_permissions(client, make_user):
    user = make_user(UserRole.SME, email="sme@example.com")
    response = client.post("/api/auth/login", json={"email": "sme@example.com", "password": "password123"})
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == user.id
    assert "validate:ai" in data["user"]["permissions"]
    assert data["user"]["lastLoginAt"] is not None

    claims = decode_access_token(data["token"])
    assert claims["sub"] == "sme@example.com"
    assert claims["id"] == user.id
    assert claims["role"] == "sme"


def test_login_with_wrong_password_is_unauthorized(client, analyst):
    response = client.post("/api/auth/login", json={"email": analyst.email, "password": "wrongpassword"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_with_unknown_email_is_unauthorized(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "password123"})
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_session_requires_token(client):
    response = client.get("/api/auth/session")
    assert response.status_code == 401


def test_session_returns_current_user(client, analyst, headers_for):
    response = client.get("/api/auth/session", headers=headers_for(analyst))
    assert response.status_code == 200
    assert response.json()["user"]["email"] == analyst.email


def test_session_rejects_expired_token(client, analyst):
    token = create_access_token({"sub": analyst.email}, expires_delta=timedelta(minutes=-1))
    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_session_rejects_token_for_deleted_user(client):
    token = create_access_token({"sub": "ghost@example.com"})
    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_logout(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Successfully logged out"}


def test_password_hashing():
    hashed = get_password_hash("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)
