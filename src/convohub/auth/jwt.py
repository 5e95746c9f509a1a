"""JWT token generation and validation

This module issues and validates the three kinds of tokens ConvoHub uses.
All tokens are HS256-signed; each kind has its own secret so a token of one
kind can never be replayed as another.

Staff access token (JWT_SECRET):
================================
- sub: User ID as UUID string
- company_id: Company (tenant) ID; every staff query filters by it
- role: "OWNER" | "ADMIN" | "EMPLOYEE" | "GUEST"
- email: User's email address
- iat / exp: issue and expiry timestamps (JWT_EXPIRY_MINUTES, default 60)

Invitation token (JWT_SECRET_INVITED_USER_REG):
===============================================
- sub: PendingUser ID
- company_id: Company the invitation belongs to
- typ: "invite"
- exp: INVITE_TOKEN_EXPIRY_MINUTES (default 60)

Customer token (CUSTOMER_JWT_SECRET, falls back to JWT_SECRET):
===============================================================
- sub: Customer ID
- company_id, source, contact: identity of the customer at issue time
- typ: "customer"
- exp: CUSTOMER_TOKEN_EXPIRY_DAYS (default 30)

Meta OAuth state (JWT_SECRET):
=============================
- company_id: Company starting the Facebook connection
- nonce: random value, one per login attempt
- typ: "oauth_state"
- exp: 10 minutes

Example staff token payload:
{
  "sub": "550e8400-e29b-41d4-a716-446655440000",
  "company_id": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
  "role": "EMPLOYEE",
  "email": "agent@acme.io",
  "iat": 1704368400,
  "exp": 1704372000
}
"""

import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from uuid import UUID
import jwt


INVITE_TOKEN_TYPE = "invite"
CUSTOMER_TOKEN_TYPE = "customer"
OAUTH_STATE_TYPE = "oauth_state"
OAUTH_STATE_LIFETIME = timedelta(minutes=10)


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from environment.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = os.getenv('JWT_SECRET')
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def _get_invite_secret() -> str:
    secret = os.getenv('JWT_SECRET_INVITED_USER_REG')
    if not secret:
        raise ValueError("JWT_SECRET_INVITED_USER_REG environment variable is not set")
    return secret


def _get_customer_secret() -> str:
    return os.getenv('CUSTOMER_JWT_SECRET') or _get_jwt_secret()


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name, str(default))
    try:
        return int(value)
    except ValueError:
        return default


def _get_jwt_expiry_minutes() -> int:
    """Get JWT_EXPIRY_MINUTES from environment (default: 60)."""
    return _get_int_env('JWT_EXPIRY_MINUTES', 60)


def _encode(claims: Dict[str, Any], secret: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload['iat'] = int(now.timestamp())
    payload['exp'] = int((now + lifetime).timestamp())
    return jwt.encode(payload, secret, algorithm='HS256')


def _decode(token: str, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")


def create_access_token(
    user_id: UUID,
    company_id: UUID,
    role: str,
    email: str
) -> str:
    """Create a JWT access token for an authenticated staff user.

    Args:
        user_id: User's UUID
        company_id: Company's UUID
        role: User's role (OWNER, ADMIN, EMPLOYEE, GUEST)
        email: User's email address

    Returns:
        str: Signed JWT token

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    claims = {
        'sub': str(user_id),
        'company_id': str(company_id),
        'role': role,
        'email': email,
    }
    return _encode(claims, _get_jwt_secret(), timedelta(minutes=_get_jwt_expiry_minutes()))


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a staff access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
        ValueError: If JWT_SECRET is not set
    """
    payload = _decode(token, _get_jwt_secret())
    # Customer tokens may share JWT_SECRET; they carry a typ claim, staff tokens don't
    if 'typ' in payload:
        raise jwt.InvalidTokenError("Invalid token: not an access token")
    return payload


def create_invite_token(pending_user_id: UUID, company_id: UUID) -> str:
    """Create the signed token embedded in an invitation link."""
    claims = {
        'sub': str(pending_user_id),
        'company_id': str(company_id),
        'typ': INVITE_TOKEN_TYPE,
    }
    lifetime = timedelta(minutes=_get_int_env('INVITE_TOKEN_EXPIRY_MINUTES', 60))
    return _encode(claims, _get_invite_secret(), lifetime)


def decode_invite_token(token: str) -> Dict[str, Any]:
    """Decode an invitation token, rejecting tokens of any other kind."""
    payload = _decode(token, _get_invite_secret())
    if payload.get('typ') != INVITE_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Invalid token: not an invitation token")
    return payload


def create_customer_token(
    customer_id: UUID,
    company_id: UUID,
    source: str,
    contact: str
) -> str:
    """Create a long-lived token for an end customer (chat widget, apps)."""
    claims = {
        'sub': str(customer_id),
        'company_id': str(company_id),
        'source': source,
        'contact': contact,
        'typ': CUSTOMER_TOKEN_TYPE,
    }
    lifetime = timedelta(days=_get_int_env('CUSTOMER_TOKEN_EXPIRY_DAYS', 30))
    return _encode(claims, _get_customer_secret(), lifetime)


def decode_customer_token(token: str) -> Dict[str, Any]:
    """Decode a customer token, rejecting tokens of any other kind."""
    payload = _decode(token, _get_customer_secret())
    if payload.get('typ') != CUSTOMER_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Invalid token: not a customer token")
    return payload


def create_oauth_state(company_id: UUID) -> str:
    """Create the state parameter for the Meta OAuth dialog."""
    claims = {
        'company_id': str(company_id),
        'nonce': secrets.token_urlsafe(16),
        'typ': OAUTH_STATE_TYPE,
    }
    return _encode(claims, _get_jwt_secret(), OAUTH_STATE_LIFETIME)


def decode_oauth_state(state: str) -> Dict[str, Any]:
    """Decode an OAuth state parameter.

    Raises:
        jwt.ExpiredSignatureError: State older than 10 minutes
        jwt.InvalidTokenError: Tampered state or a token of another kind
    """
    payload = _decode(state, _get_jwt_secret())
    if payload.get('typ') != OAUTH_STATE_TYPE:
        raise jwt.InvalidTokenError("Invalid token: not an OAuth state")
    return payload
