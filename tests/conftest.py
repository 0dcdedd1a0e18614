import os

# Settings are read at import time, so the test environment is fixed before tasknest loads
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FILE"] = ""
os.environ["SEED_ADMIN_ON_STARTUP"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "true"

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tasknest import crud, models  # noqa: E402,F401
from tasknest.core.config import settings  # noqa: E402
from tasknest.db.base import Base  # noqa: E402
from tasknest.db.session import SessionLocal, engine  # noqa: E402
from tasknest.main import app  # noqa: E402
from tasknest.schemas import UserCreate  # noqa: E402

USER_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def login():
    """Return a fresh client signed in through the login endpoint."""
    def _login(email: str, password: str = USER_PASSWORD) -> TestClient:
        signed_in = TestClient(app)
        response = signed_in.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return signed_in
    return _login


@pytest.fixture
def make_user(db):
    def _make_user(email: str, name: str = "Test User", **kwargs) -> models.User:
        return crud.user.create(
            db, obj_in=UserCreate(email=email, name=name, password=USER_PASSWORD, **kwargs)
        )
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("alice@tasknest.io", name="Alice")


@pytest.fixture
def other_user(make_user):
    return make_user("bob@tasknest.io", name="Bob")


@pytest.fixture
def admin(db):
    admin_user, _ = crud.user.ensure_admin(
        db,
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        name=settings.ADMIN_NAME,
    )
    return admin_user


@pytest.fixture
def user_client(user, login):
    return login(user.email)


@pytest.fixture
def other_client(other_user, login):
    return login(other_user.email)


@pytest.fixture
def admin_client(admin, login):
    return login(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


@pytest.fixture
def iso():
    """ISO timestamp relative to the current UTC time."""
    def _iso(**delta) -> str:
        return (datetime.utcnow() + timedelta(**delta)).replace(microsecond=0).isoformat()
    return _iso
