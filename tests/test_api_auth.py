from conftest import create_user, login
from shared.utils.enums import UserRole


def test_login_returns_token_and_user(client, db):
    create_user(db, "admin", "admin-pass", UserRole.SUPER_ADMIN.value)
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin-pass"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "super_admin"


def test_login_with_wrong_password(client, db):
    create_user(db, "admin", "admin-pass", UserRole.SUPER_ADMIN.value)
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401
    assert resp.json()["status"] == "Failure"


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/shops").status_code in (401, 403)


def test_garbage_token_is_rejected(client):
    resp = client.get("/api/shops", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_me(client, admin_headers):
    resp = client.get("/api/auth/me", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["username"] == "admin"


def test_owner_user_cannot_manage_users(client, estate, admin_headers):
    owner = estate.owner()
    resp = client.post("/api/users", headers=admin_headers, json={
        "username": "rahim", "password": "owner-pass", "role": "owner",
        "owner_id": owner["id"]})
    assert resp.status_code == 200, resp.text

    headers = login(client, "rahim", "owner-pass")
    assert client.get("/api/users", headers=headers).status_code == 403


def test_owner_account_needs_owner_link(client, admin_headers):
    resp = client.post("/api/users", headers=admin_headers, json={
        "username": "lonely", "password": "owner-pass", "role": "owner"})
    assert resp.status_code == 400
