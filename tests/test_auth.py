from urllib.parse import quote

from fastapi.testclient import TestClient

from tasknest import crud
from tasknest.main import app


def test_register_creates_user_and_sets_cookies(client, db):
    response = client.post(
        "/api/auth/register",
        json={"name": "Carol", "email": "carol@tasknest.io", "password": "hunter22"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["email"] == "carol@tasknest.io"
    assert "password" not in body["user"]

    assert response.cookies["userEmail"] == quote("carol@tasknest.io", safe="")
    assert response.cookies["userId"] == str(body["user"]["id"])

    stored = crud.user.get_by_email(db, email="carol@tasknest.io")
    assert stored is not None
    assert stored.hashed_password != "hunter22"
    assert stored.role == "USER"
    assert stored.is_active is True


def test_register_cookie_is_readable_by_browser(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Carol", "email": "carol@tasknest.io", "password": "hunter22"},
    )
    set_cookie = ";".join(response.headers.get_list("set-cookie")).lower()
    assert "httponly" not in set_cookie
    assert "samesite=lax" in set_cookie
    assert "max-age=604800" in set_cookie


def test_register_requires_all_fields(client):
    response = client.post("/api/auth/register", json={"email": "carol@tasknest.io", "password": "hunter22"})
    assert response.status_code == 400
    assert response.json() == {"error": True, "message": "Missing required fields", "status_code": 400}


def test_register_rejects_short_password(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Carol", "email": "carol@tasknest.io", "password": "abc"},
    )
    assert response.status_code == 400
    assert "at least 6" in response.json()["message"]


def test_register_rejects_invalid_email(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Carol", "email": "not-an-email", "password": "hunter22"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email address"


def test_register_duplicate_email(client, user):
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice again", "email": user.email, "password": "hunter22"},
    )
    assert response.status_code == 409
    assert response.json()["message"] == "User already exists"


def test_login_success_records_last_login(client, user, db):
    assert user.last_login_at is None
    response = client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"id": user.id, "email": user.email, "name": "Alice", "role": "USER"}
    assert response.cookies["userEmail"] == quote(user.email, safe="")

    db.expire_all()
    assert crud.user.get(db, id=user.id).last_login_at is not None


def test_login_wrong_password(client, user):
    response = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "ghost@tasknest.io", "password": "secret123"})
    assert response.status_code == 401


def test_login_requires_email_and_password(client):
    response = client.post("/api/auth/login", json={"email": "alice@tasknest.io"})
    assert response.status_code == 400


def test_login_deactivated_account(client, make_user):
    inactive = make_user("dormant@tasknest.io", is_active=False)
    response = client.post("/api/auth/login", json={"email": inactive.email, "password": "secret123"})
    assert response.status_code == 403
    assert response.json()["message"] == "Account is deactivated"


def test_logout_clears_session(user_client):
    assert user_client.get("/api/user/profile").status_code == 200

    response = user_client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    expired = " ".join(response.headers.get_list("set-cookie"))
    for name in ("userEmail", "userId", "user-email", "auth-token"):
        assert f"{name}=" in expired

    assert user_client.get("/api/user/profile").status_code == 401


def test_missing_cookie_is_unauthorized(client):
    response = client.get("/api/reminders/")
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"


def test_legacy_cookie_is_accepted(user):
    legacy = TestClient(app, cookies={"user-email": quote(user.email, safe="")})
    response = legacy.get("/api/user/profile")
    assert response.status_code == 200
    assert response.json()["email"] == user.email


def test_cookie_for_unknown_user(db):
    stranger = TestClient(app, cookies={"userEmail": quote("ghost@tasknest.io", safe="")})
    response = stranger.get("/api/user/profile")
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_login_with_mixed_case_domain_as_registered(client):
    registered = client.post(
        "/api/auth/register",
        json={"name": "Carol", "email": "Carol@Example.COM", "password": "hunter22"},
    )
    assert registered.status_code == 201

    response = client.post("/api/auth/login", json={"email": "Carol@Example.COM", "password": "hunter22"})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == registered.json()["user"]["email"]


def test_login_with_malformed_email(client):
    response = client.post("/api/auth/login", json={"email": "not-an-email", "password": "secret123"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"
