from __future__ import annotations

from fastapi.testclient import TestClient

from recipe_backend.app import app
from recipe_backend.store import get_store


def _login(email="user@example.com", password="user123") -> tuple[TestClient, dict]:
    c = TestClient(app)
    resp = c.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return c, resp.json()


def _login_admin() -> tuple[TestClient, dict]:
    return _login("admin@example.com", "admin123")


# ── Admin listing ────────────────────────────────────────────────────────


def test_admin_lists_users_with_search():
    c, _ = _login_admin()
    body = c.get("/api/users", params={"search": "adm"}).json()
    assert body["total"] == 1
    assert body["users"][0]["email"] == "admin@example.com"
    assert "passwordHash" not in body["users"][0]


def test_admin_gets_single_user():
    _, user = _login()
    c, _ = _login_admin()
    resp = c.get(f"/api/users/{user['id']}")
    assert resp.status_code == 200
    assert resp.json()["username"] == "user"


def test_get_unknown_user():
    c, _ = _login_admin()
    resp = c.get("/api/users/000000000000000000000000")
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found!"


# ── Update ───────────────────────────────────────────────────────────────


def test_user_updates_own_profile_and_session():
    c, me = _login()
    resp = c.put(f"/api/users/{me['id']}", json={"username": "renamed"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "renamed"
    assert c.get("/api/auth/profile").json()["username"] == "renamed"


def test_user_cannot_update_someone_else():
    _, admin = _login_admin()
    c, _ = _login()
    resp = c.put(f"/api/users/{admin['id']}", json={"username": "hijack"})
    assert resp.status_code == 403
    assert resp.json()["message"] == "You are not authorized!"


def test_user_cannot_promote_self():
    c, me = _login()
    resp = c.put(f"/api/users/{me['id']}", json={"role": "admin"})
    assert resp.status_code == 403
    assert resp.json()["message"] == "Only admins can change roles!"


def test_admin_changes_role():
    _, user = _login()
    c, _ = _login_admin()
    resp = c.put(f"/api/users/{user['id']}", json={"role": "admin"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"


def test_password_change_takes_effect():
    c, me = _login()
    assert c.put(f"/api/users/{me['id']}", json={"password": "newpass1"}).status_code == 200

    old = TestClient(app).post("/api/auth/login", json={"email": "user@example.com", "password": "user123"})
    new = TestClient(app).post("/api/auth/login", json={"email": "user@example.com", "password": "newpass1"})
    assert old.status_code == 400
    assert new.status_code == 200


def test_update_to_taken_email():
    c, me = _login()
    resp = c.put(f"/api/users/{me['id']}", json={"email": "admin@example.com"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already exists!"


# ── Delete ───────────────────────────────────────────────────────────────


def test_delete_self_clears_session_and_reviews(add_recipe):
    recipe = add_recipe()
    c, me = _login()
    c.post(f"/api/recipes/{recipe.id}/rate", json={"rating": 5})
    assert get_store().recipes.get(recipe.id)["averageRating"] == 5.0

    resp = c.delete(f"/api/users/{me['id']}")

    assert resp.status_code == 200
    assert resp.json()["message"] == "User deleted successfully!"
    assert c.get("/api/auth/profile").status_code == 401
    assert get_store().reviews.for_recipe(recipe.id) == []
    assert get_store().recipes.get(recipe.id)["averageRating"] == 0.0


def test_admin_deletes_user():
    _, user = _login()
    c, _ = _login_admin()
    assert c.delete(f"/api/users/{user['id']}").status_code == 200
    assert c.get(f"/api/users/{user['id']}").status_code == 404


# ── Favorites ────────────────────────────────────────────────────────────


def test_favorites_lifecycle(add_recipe):
    recipe = add_recipe(title="Favorite Stew")
    c, _ = _login()

    added = c.post(f"/api/users/favorites/{recipe.id}")
    assert added.status_code == 200
    assert added.json()["message"] == "Recipe added to favorites!"

    again = c.post(f"/api/users/favorites/{recipe.id}")
    assert again.status_code == 400
    assert again.json()["message"] == "Recipe already in favorites"

    listed = c.get("/api/users/favorites").json()
    assert [r["title"]["en"] for r in listed] == ["Favorite Stew"]

    removed = c.delete(f"/api/users/favorites/{recipe.id}")
    assert removed.status_code == 200
    assert c.get("/api/users/favorites").json() == []


def test_favorite_unknown_recipe():
    c, _ = _login()
    resp = c.post("/api/users/favorites/000000000000000000000000")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Recipe not found!"


def test_favorites_require_login():
    assert TestClient(app).get("/api/users/favorites").status_code == 401


# ── Stale sessions ───────────────────────────────────────────────────────


def test_deleted_user_session_cannot_write(add_recipe):
    recipe = add_recipe()
    TestClient(app).post("/api/auth/register", json={
        "username": "bob", "email": "bob@example.com", "password": "secret1",
    })
    bob, me = _login("bob@example.com", "secret1")
    admin, _ = _login_admin()
    assert admin.delete(f"/api/users/{me['id']}").status_code == 200

    resp = bob.post(f"/api/recipes/{recipe.id}/rate", json={"rating": 5})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authenticated"
    assert get_store().reviews.for_recipe(recipe.id) == []
    assert get_store().recipes.get(recipe.id)["averageRating"] == 0.0


def test_demoted_admin_loses_admin_routes():
    c, me = _login_admin()
    assert c.get("/api/users").status_code == 200

    get_store().users.update(me["id"], {"role": "user"})

    resp = c.get("/api/users")
    assert resp.status_code == 403
    assert resp.json()["message"] == "You are not an admin!"
    assert c.get("/api/auth/profile").json()["role"] == "user"
