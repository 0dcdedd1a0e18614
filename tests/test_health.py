import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from tasknest import crud
from tasknest.core.config import Settings, settings
from tasknest.core.security import decode_session_email, encode_session_email, get_password_hash, verify_password
from tasknest.db.base import Base
from tasknest.db.session import engine
from tasknest.main import app


def test_health_check(client, user):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "healthy"
    assert body["project"] == settings.PROJECT_NAME
    assert body["user_count"] == 1


def test_startup_creates_tables_and_seeds_admin(monkeypatch, db):
    Base.metadata.drop_all(bind=engine)
    monkeypatch.setattr(settings, "SEED_ADMIN_ON_STARTUP", True)

    with TestClient(app) as started:
        assert started.get("/health").json()["database"] == "healthy"

    admin = crud.user.get_by_email(db, email=settings.ADMIN_EMAIL)
    assert admin is not None
    assert admin.role == "ADMIN"
    assert verify_password(settings.ADMIN_PASSWORD, admin.hashed_password)


def test_admin_seed_is_idempotent(db):
    first, created = crud.user.ensure_admin(db, email="root@tasknest.io", password="rootpass", name="root")
    again, created_again = crud.user.ensure_admin(db, email="root@tasknest.io", password="other", name="root")
    assert created is True
    assert created_again is False
    assert again.id == first.id


def test_unknown_route_is_not_found(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"error": True, "message": "Not Found", "status_code": 404}


def test_wrong_method_uses_error_envelope(client):
    response = client.delete("/health")
    assert response.status_code == 405
    assert response.json() == {"error": True, "message": "Method Not Allowed", "status_code": 405}


def test_password_hashing():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret123", "")


def test_session_email_encoding():
    encoded = encode_session_email("alice+list@tasknest.io")
    assert "@" not in encoded
    assert decode_session_email(encoded) == "alice+list@tasknest.io"
    assert decode_session_email(" alice%40tasknest.io ") == "alice@tasknest.io"


def test_settings_derive_database_uri():
    configured = Settings(
        SQLALCHEMY_DATABASE_URI=None,
        POSTGRES_USER="nest",
        POSTGRES_PASSWORD="p@ss word",
        POSTGRES_SERVER="db",
        POSTGRES_DB="reminders",
    )
    assert configured.SQLALCHEMY_DATABASE_URI == "postgresql://nest:p%40ss+word@db:5432/reminders"


def test_settings_environment_flags():
    production = Settings(ENVIRONMENT="production")
    assert production.is_production
    assert production.secure_cookies
    assert not production.debug_mode
    assert production.allowed_cors_origins == []


def test_settings_validation():
    with pytest.raises(ValidationError):
        Settings(BCRYPT_ROUNDS=3)
    with pytest.raises(ValidationError):
        Settings(DEFAULT_PAGE_SIZE=500, MAX_PAGE_SIZE=100)
