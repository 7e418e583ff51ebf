from __future__ import annotations

from fastapi.testclient import TestClient

from recipe_backend.app import app

client = TestClient(app)


def _login_user(c):
    return c.post("/api/auth/login", json={"email": "user@example.com", "password": "user123"})


def _login_admin(c):
    return c.post("/api/auth/login", json={"email": "admin@example.com", "password": "admin123"})


# ── Register ─────────────────────────────────────────────────────────────


def test_register_then_login():
    c = TestClient(app)
    resp = c.post("/api/auth/register", json={
        "username": "sam", "email": "sam@example.com", "password": "secret1",
    })
    assert resp.status_code == 200
    assert resp.json()["message"] == "User has been created!"

    resp = c.post("/api/auth/login", json={"email": "sam@example.com", "password": "secret1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "sam"
    assert body["role"] == "user"
    assert "passwordHash" not in body
    assert "password" not in body


def test_register_duplicate_username():
    resp = client.post("/api/auth/register", json={
        "username": "user", "email": "new@example.com", "password": "secret1",
    })
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username already exists!"


def test_register_duplicate_email():
    resp = client.post("/api/auth/register", json={
        "username": "newbie", "email": "user@example.com", "password": "secret1",
    })
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already exists!"


def test_register_validation():
    resp = client.post("/api/auth/register", json={
        "username": "x", "email": "not-an-email", "password": "1",
    })
    assert resp.status_code == 422
    assert resp.json()["message"] == "Invalid request"


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_user():
    resp = _login_user(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "user"
    assert body["role"] == "user"


def test_login_success_admin():
    resp = _login_admin(client)
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"


def test_login_wrong_password():
    resp = client.post("/api/auth/login", json={"email": "user@example.com", "password": "wrong"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Wrong email or password!"


def test_login_unknown_user():
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found!"


def test_profile_when_logged_in():
    c = TestClient(app)
    _login_user(c)
    resp = c.get("/api/auth/profile")
    assert resp.status_code == 200
    assert resp.json()["email"] == "user@example.com"
    assert resp.json()["role"] == "user"


def test_profile_not_logged_in():
    c = TestClient(app)
    resp = c.get("/api/auth/profile")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authenticated"


def test_logout():
    c = TestClient(app)
    _login_user(c)
    resp = c.get("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out successfully!"
    # Session should be cleared
    resp = c.get("/api/auth/profile")
    assert resp.status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_rate_requires_login():
    c = TestClient(app)
    resp = c.post("/api/recipes/some-id/rate", json={"rating": 4})
    assert resp.status_code == 401


def test_create_recipe_requires_admin():
    c = TestClient(app)
    _login_user(c)
    resp = c.post("/api/recipes", json={})
    assert resp.status_code in (403, 422)


def test_user_list_requires_admin():
    c = TestClient(app)
    _login_user(c)
    resp = c.get("/api/users")
    assert resp.status_code == 403
    assert resp.json()["message"] == "You are not an admin!"


def test_user_list_allowed_for_admin():
    c = TestClient(app)
    _login_admin(c)
    resp = c.get("/api/users")
    assert resp.status_code == 200


# ── Public endpoints stay public ─────────────────────────────────────────


def test_health_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200


def test_recipe_list_is_public():
    c = TestClient(app)
    assert c.get("/api/recipes").status_code == 200


def test_unknown_route():
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Route not found"}
