"""Integration tests for signup, login and the current user endpoint"""

import pytest

from convohub.models.audit_log import AuditLog
from convohub.models.company import Company
from convohub.models.user import User
from conftest import TEST_PASSWORD


pytestmark = pytest.mark.integration


SIGNUP = {
    "company_name": "Initech Help",
    "subdomain": "initech",
    "user_name": "Peter Gibbons",
    "email": "Peter@Initech.io",
    "password": "TpsReport42",
    "country": "US",
}


class TestSignup:

    def test_signup_creates_pending_company_and_owner(self, client, db_session):
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 3600

        company = db_session.query(Company).filter(Company.subdomain == "initech").one()
        assert company.status == "PENDING"
        owner = db_session.query(User).filter(User.company_id == company.id).one()
        assert owner.role == "OWNER"
        assert owner.email == "peter@initech.io"

    def test_signup_token_works(self, client):
        token = client.post("/api/v1/auth/signup", json=SIGNUP).json()["access_token"]

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "OWNER"

    def test_weak_password(self, client):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "short1"})
        assert response.status_code == 422

    def test_duplicate_subdomain(self, client, test_company):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "subdomain": "acme"})
        assert response.status_code == 409
        assert response.json()["detail"] == "Subdomain already exists"

    def test_duplicate_email(self, client, owner_user):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "OWNER@acme.io"})
        assert response.status_code == 409

    def test_invalid_subdomain_format(self, client):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "subdomain": "Not Valid"})
        assert response.status_code == 422

    def test_signup_is_audited(self, client, db_session):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        assert db_session.query(AuditLog).filter(AuditLog.action == "COMPANY_CREATED").count() == 1


class TestLogin:

    def test_login_success(self, client, admin_user, db_session):
        response = client.post("/api/v1/auth/login", json={"email": "admin@acme.io", "password": TEST_PASSWORD})

        assert response.status_code == 200
        assert response.json()["access_token"]
        db_session.refresh(admin_user)
        assert admin_user.last_login_at is not None

    def test_login_email_is_case_insensitive(self, client, admin_user):
        response = client.post("/api/v1/auth/login", json={"email": "ADMIN@Acme.io", "password": TEST_PASSWORD})
        assert response.status_code == 200

    def test_wrong_password(self, client, admin_user, db_session):
        response = client.post("/api/v1/auth/login", json={"email": "admin@acme.io", "password": "Wrong123"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"
        assert db_session.query(AuditLog).filter(AuditLog.action == "LOGIN_FAILED").count() == 1

    def test_unknown_email_same_message(self, client, db_session):
        response = client.post("/api/v1/auth/login", json={"email": "nobody@acme.io", "password": TEST_PASSWORD})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_retired_user_rejected(self, client, admin_user, db_session):
        admin_user.status = "RETIRED"
        db_session.commit()

        response = client.post("/api/v1/auth/login", json={"email": "admin@acme.io", "password": TEST_PASSWORD})

        assert response.status_code == 401
        assert response.json()["detail"] == "Account is retired"

    def test_on_leave_user_may_login(self, client, admin_user, db_session):
        admin_user.status = "ONLEAVE"
        db_session.commit()

        response = client.post("/api/v1/auth/login", json={"email": "admin@acme.io", "password": TEST_PASSWORD})
        assert response.status_code == 200


class TestMe:

    def test_me_returns_user(self, employee_client, employee_user):
        response = employee_client.get("/api/v1/auth/me")

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == str(employee_user.id)
        assert "password_hash" not in user

    def test_me_requires_token(self, client, db_session):
        assert client.get("/api/v1/auth/me").status_code in (401, 403)

    def test_retired_user_token_forbidden(self, admin_client, admin_user, db_session):
        admin_user.status = "RETIRED"
        db_session.commit()

        response = admin_client.get("/api/v1/auth/me")

        assert response.status_code == 403
        assert response.json()["detail"] == "User account is retired"
