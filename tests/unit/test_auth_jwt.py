"""Unit tests for JWT token generation and validation

Tests cover:
- Staff access tokens
- Invitation and customer tokens (separate secrets and typ claims)
- Meta OAuth state tokens
- Expired and tampered tokens
"""

import time
from uuid import uuid4

import jwt
import pytest

from convohub.auth.jwt import (
    create_access_token,
    create_customer_token,
    create_invite_token,
    create_oauth_state,
    decode_customer_token,
    decode_invite_token,
    decode_oauth_state,
    decode_token,
)


class TestAccessToken:
    """Test staff access tokens"""

    def test_round_trip_claims(self):
        user_id = uuid4()
        company_id = uuid4()

        token = create_access_token(user_id=user_id, company_id=company_id, role="ADMIN", email="admin@acme.io")
        payload = decode_token(token)

        assert payload["sub"] == str(user_id)
        assert payload["company_id"] == str(company_id)
        assert payload["role"] == "ADMIN"
        assert payload["email"] == "admin@acme.io"
        assert payload["exp"] > payload["iat"]

    def test_expiry_follows_env(self, monkeypatch):
        monkeypatch.setenv("JWT_EXPIRY_MINUTES", "5")
        token = create_access_token(uuid4(), uuid4(), "GUEST", "guest@acme.io")
        payload = decode_token(token)
        assert payload["exp"] - payload["iat"] == 300

    def test_expired_token_rejected(self, monkeypatch):
        secret = "test-jwt-secret-key-256-bits-minimum-length-required-for-security"
        monkeypatch.setenv("JWT_SECRET", secret)
        now = int(time.time())
        token = jwt.encode(
            {"sub": str(uuid4()), "company_id": str(uuid4()), "role": "ADMIN",
             "email": "a@acme.io", "iat": now - 7200, "exp": now - 3600},
            secret,
            algorithm="HS256",
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": str(uuid4())}, "some-other-secret-that-is-long-enough", algorithm="HS256")
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)

    def test_missing_secret_raises(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(ValueError, match="JWT_SECRET"):
            create_access_token(uuid4(), uuid4(), "ADMIN", "a@acme.io")


class TestTokenKinds:
    """A token of one kind is never accepted as another"""

    def test_invite_token_round_trip(self):
        pending_id = uuid4()
        company_id = uuid4()
        payload = decode_invite_token(create_invite_token(pending_id, company_id))
        assert payload["sub"] == str(pending_id)
        assert payload["company_id"] == str(company_id)
        assert payload["typ"] == "invite"

    def test_invite_token_is_not_access_token(self):
        token = create_invite_token(uuid4(), uuid4())
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)

    def test_access_token_is_not_invite_token(self):
        token = create_access_token(uuid4(), uuid4(), "ADMIN", "a@acme.io")
        with pytest.raises(jwt.InvalidTokenError):
            decode_invite_token(token)

    def test_customer_token_round_trip(self):
        customer_id = uuid4()
        payload = decode_customer_token(
            create_customer_token(customer_id, uuid4(), "WEB", "john@example.com")
        )
        assert payload["sub"] == str(customer_id)
        assert payload["source"] == "WEB"
        assert payload["contact"] == "john@example.com"

    def test_customer_token_sharing_secret_is_not_access_token(self, monkeypatch):
        """Without CUSTOMER_JWT_SECRET both kinds use JWT_SECRET; the typ claim still separates them"""
        monkeypatch.delenv("CUSTOMER_JWT_SECRET", raising=False)
        token = create_customer_token(uuid4(), uuid4(), "WEB", "john@example.com")
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)

    def test_access_token_is_not_customer_token(self, monkeypatch):
        monkeypatch.delenv("CUSTOMER_JWT_SECRET", raising=False)
        token = create_access_token(uuid4(), uuid4(), "ADMIN", "a@acme.io")
        with pytest.raises(jwt.InvalidTokenError):
            decode_customer_token(token)


class TestOAuthState:

    def test_state_round_trip(self):
        company_id = uuid4()
        payload = decode_oauth_state(create_oauth_state(company_id))
        assert payload["company_id"] == str(company_id)
        assert payload["typ"] == "oauth_state"
        assert payload["exp"] - payload["iat"] == 600

    def test_states_are_unique(self):
        company_id = uuid4()
        assert create_oauth_state(company_id) != create_oauth_state(company_id)

    def test_access_token_is_not_state(self):
        token = create_access_token(uuid4(), uuid4(), "ADMIN", "a@acme.io")
        with pytest.raises(jwt.InvalidTokenError):
            decode_oauth_state(token)

    def test_state_is_not_access_token(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(create_oauth_state(uuid4()))
