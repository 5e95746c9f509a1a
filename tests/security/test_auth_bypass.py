"""Security tests: forged, expired and misused tokens must not authenticate"""

import os
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from conftest import auth_headers, token_for
from convohub.auth.jwt import create_customer_token, create_invite_token, create_oauth_state
from convohub.models.user import User


pytestmark = pytest.mark.security

ME = "/api/v1/auth/me"


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _staff_claims(user, **overrides):
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        "company_id": str(user.company_id),
        "role": user.role,
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(minutes=60),
    }
    claims.update(overrides)
    return claims


class TestTokenValidation:

    def test_missing_token(self, client):
        assert client.get(ME).status_code in (401, 403)

    def test_garbage_token(self, client):
        assert client.get(ME, headers=_bearer("not-a-jwt")).status_code == 401

    def test_tampered_signature(self, client, admin_user):
        token = token_for(admin_user)
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"

        assert client.get(ME, headers=_bearer(tampered)).status_code == 401

    def test_wrong_secret(self, client, admin_user):
        token = jwt.encode(_staff_claims(admin_user), "another-secret-entirely", algorithm="HS256")
        assert client.get(ME, headers=_bearer(token)).status_code == 401

    def test_unsigned_token(self, client, admin_user):
        token = jwt.encode(_staff_claims(admin_user), key=None, algorithm="none")

        assert client.get(ME, headers=_bearer(token)).status_code == 401

    def test_expired_token(self, client, admin_user):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            _staff_claims(admin_user, iat=past, exp=past + timedelta(minutes=60)),
            os.environ["JWT_SECRET"],
            algorithm="HS256",
        )

        response = client.get(ME, headers=_bearer(token))
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_token_for_deleted_user(self, client, admin_user, db_session):
        headers = auth_headers(admin_user)
        db_session.query(User).filter(User.id == admin_user.id).delete()
        db_session.commit()

        assert client.get(ME, headers=headers).status_code == 401

    def test_company_mismatch(self, client, admin_user, other_company):
        token = jwt.encode(
            _staff_claims(admin_user, company_id=str(other_company.id)),
            os.environ["JWT_SECRET"],
            algorithm="HS256",
        )
        assert client.get(ME, headers=_bearer(token)).status_code == 401

    def test_unknown_subject(self, client, admin_user):
        token = jwt.encode(
            _staff_claims(admin_user, sub=str(uuid.uuid4())),
            os.environ["JWT_SECRET"],
            algorithm="HS256",
        )
        assert client.get(ME, headers=_bearer(token)).status_code == 401


class TestTokenKinds:

    def test_invite_token_is_not_a_staff_token(self, client, test_company):
        token = create_invite_token(uuid.uuid4(), test_company.id)
        assert client.get(ME, headers=_bearer(token)).status_code == 401

    def test_customer_token_is_not_a_staff_token(self, client, test_company):
        token = create_customer_token(uuid.uuid4(), test_company.id, "WEB", "john@example.com")
        assert client.get(ME, headers=_bearer(token)).status_code == 401

    def test_oauth_state_is_not_a_staff_token(self, client, test_company):
        token = create_oauth_state(test_company.id)
        assert client.get(ME, headers=_bearer(token)).status_code == 401

    def test_staff_token_cannot_register_invitation(self, client, admin_user):
        response = client.post(
            "/api/v1/users/registration",
            json={"user_name": "Mallory", "password": "Str0ngPassword"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 401


class TestRoleEscalation:

    def test_role_claim_is_not_trusted(self, client, employee_user):
        token = jwt.encode(
            _staff_claims(employee_user, role="OWNER"),
            os.environ["JWT_SECRET"],
            algorithm="HS256",
        )

        response = client.post(
            "/api/v1/department", json={"department_name": "Escalated"}, headers=_bearer(token)
        )
        assert response.status_code == 403

    def test_employee_cannot_grant_self_admin(self, employee_client):
        response = employee_client.patch("/api/v1/users/profile", json={"role": "ADMIN"})
        assert response.status_code == 403

    def test_admin_cannot_grant_self_owner(self, admin_client):
        response = admin_client.patch("/api/v1/users/profile", json={"role": "OWNER"})
        assert response.status_code == 403

    def test_admin_cannot_invite_owner(self, admin_client):
        response = admin_client.post(
            "/api/v1/users/invite", json={"email": "boss@acme.io", "role": "OWNER"}
        )
        assert response.status_code == 403

    def test_retired_user_blocked(self, client, db_session, employee_user):
        headers = auth_headers(employee_user)
        employee_user.status = "RETIRED"
        db_session.commit()

        response = client.get(ME, headers=headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "User account is retired"
