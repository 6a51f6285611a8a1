from conftest import PASSWORD, register


def test_register_returns_token_and_user_without_password(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "Eve@Example.com", "password": PASSWORD},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "eve@example.com"
    assert body["user"]["role"] == "employee"
    assert "password" not in body["user"]
    assert "hashed_password" not in body["user"]


def test_email_is_unique_case_insensitively(client):
    register(client, "Eve", "eve@example.com")

    response = client.post(
        "/api/auth/register",
        json={"name": "Eve Again", "email": "EVE@example.com", "password": PASSWORD},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "User already exists with this email"}


def test_register_rejects_short_password(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "eve@example.com", "password": "abc"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "password" in response.json()["message"]


def test_admin_registration_requires_admin_secret(client):
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Mallory",
            "email": "mallory@example.com",
            "password": PASSWORD,
            "role": "admin",
            "adminSecret": "guess",
        },
    )

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_admin_registration_with_secret(client, admin):
    response = client.get("/api/auth/me", headers=admin["headers"])

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"


def test_login_with_any_email_case(client, employee):
    response = client.post(
        "/api/auth/login",
        json={"email": "EVE@example.com", "password": PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["id"] == employee["id"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["user"]["email"] == "eve@example.com"


def test_login_with_wrong_password(client, employee):
    response = client.post(
        "/api/auth/login",
        json={"email": "eve@example.com", "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_oauth2_token_endpoint(client, employee):
    response = client.post(
        "/api/auth/token",
        data={"username": "eve@example.com", "password": PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_protected_route_without_token(client):
    response = client.get("/api/expenses")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authorized, no token"}


def test_protected_route_with_garbage_token(client):
    response = client.get("/api/expenses", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, token failed"


def test_health_and_unknown_route(client):
    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.json()["success"] is True

    missing = client.get("/api/nothing-here")
    assert missing.status_code == 404
    assert missing.json()["success"] is False
