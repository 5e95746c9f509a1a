"""Pytest fixtures for ConvoHub API tests.

Provides reusable test fixtures for:
- In-memory SQLite database, tables created and dropped per test
- A test company with users for every role (OWNER, ADMIN, EMPLOYEE, GUEST)
- A second company for tenant isolation tests
- Test clients pre-authenticated with staff JWTs

Usage:
    def test_admin_endpoint(admin_client):
        response = admin_client.get("/api/v1/department")
        assert response.status_code == 200
"""

import os
import tempfile

# Environment must be set before convohub is imported: the engine and
# cached settings are built at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("JWT_SECRET_INVITED_USER_REG", "test-invite-secret-key-256-bits-minimum-length-required")
os.environ.setdefault("PASSWORD_PEPPER", "test-pepper-secret-key-32-chars-long")
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["REDIS_URL"] = "redis://127.0.0.1:1/0"
os.environ["LOGIN_RATE_LIMIT_ATTEMPTS"] = "10000"
os.environ["LOGIN_LOCKOUT_THRESHOLD"] = "10000"
os.environ["LOG_JSON"] = "false"
os.environ.pop("MAIL_HOST", None)
os.environ.setdefault("DOCUMENT_UPLOAD_PATH", tempfile.mkdtemp(prefix="convohub-docs-"))
os.environ.setdefault("PUBLIC_UPLOAD_PATH", tempfile.mkdtemp(prefix="convohub-public-"))

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from convohub import models  # noqa: F401  registers every model on Base.metadata
from convohub.auth.jwt import create_access_token
from convohub.auth.password import hash_password
from convohub.config import get_settings
from convohub.database import SessionLocal, engine, get_db
from convohub.models.base import Base
from convohub.models.company import Company, CompanyStatus
from convohub.models.user import User


TEST_PASSWORD = "SupportDesk42"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh database for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def document_root(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """Per-test folder for the local document storage backend."""
    root = tmp_path / "documents"
    monkeypatch.setenv("DOCUMENT_STORAGE_BACKEND", "local")
    monkeypatch.setenv("DOCUMENT_UPLOAD_PATH", str(root))
    get_settings.cache_clear()
    yield root
    get_settings.cache_clear()


def make_company(db_session: Session, name: str, subdomain: str) -> Company:
    company = Company(company_name=name, subdomain=subdomain, status=CompanyStatus.ACTIVE.value)
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


def make_user(db_session: Session, company: Company, email: str, role: str, status: str = "ACTIVE") -> User:
    user = User(
        company_id=company.id,
        user_name=f"{role.title()} User",
        email=email,
        role=role,
        status=status,
        password_hash=hash_password(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def token_for(user: User) -> str:
    return create_access_token(
        user_id=user.id,
        company_id=user.company_id,
        role=user.role,
        email=user.email,
    )


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture(scope="function")
def test_company(db_session: Session) -> Company:
    return make_company(db_session, "Acme Support", "acme")


@pytest.fixture(scope="function")
def other_company(db_session: Session) -> Company:
    return make_company(db_session, "Globex Care", "globex")


@pytest.fixture(scope="function")
def owner_user(db_session: Session, test_company: Company) -> User:
    return make_user(db_session, test_company, "owner@acme.io", "OWNER")


@pytest.fixture(scope="function")
def admin_user(db_session: Session, test_company: Company) -> User:
    return make_user(db_session, test_company, "admin@acme.io", "ADMIN")


@pytest.fixture(scope="function")
def employee_user(db_session: Session, test_company: Company) -> User:
    return make_user(db_session, test_company, "agent@acme.io", "EMPLOYEE")


@pytest.fixture(scope="function")
def guest_user(db_session: Session, test_company: Company) -> User:
    return make_user(db_session, test_company, "guest@acme.io", "GUEST")


@pytest.fixture(scope="function")
def other_admin(db_session: Session, other_company: Company) -> User:
    return make_user(db_session, other_company, "admin@globex.io", "ADMIN")


@pytest.fixture(scope="function")
def app(db_session: Session):
    """The FastAPI app with get_db bound to the test session."""
    from convohub.main import app as fastapi_app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """Unauthenticated test client for public endpoints."""
    return TestClient(app)


def _client_for(app, user: User) -> TestClient:
    test_client = TestClient(app)
    test_client.headers.update(auth_headers(user))
    return test_client


@pytest.fixture(scope="function")
def owner_client(app, owner_user: User) -> TestClient:
    return _client_for(app, owner_user)


@pytest.fixture(scope="function")
def admin_client(app, admin_user: User) -> TestClient:
    return _client_for(app, admin_user)


@pytest.fixture(scope="function")
def employee_client(app, employee_user: User) -> TestClient:
    return _client_for(app, employee_user)


@pytest.fixture(scope="function")
def guest_client(app, guest_user: User) -> TestClient:
    return _client_for(app, guest_user)


@pytest.fixture(scope="function")
def other_admin_client(app, other_admin: User) -> TestClient:
    return _client_for(app, other_admin)
