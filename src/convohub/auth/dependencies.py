"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Extracting and validating staff JWT tokens from requests
- Loading the current authenticated user
- Enforcing role-based access control (RBAC)
- Resolving invitation and customer tokens

Usage:
    @router.get("/protected")
    def protected_endpoint(user: User = Depends(get_current_user)):
        return {"message": f"Hello {user.user_name}"}

    @router.get("/admin-only")
    def admin_endpoint(user: User = Depends(require_role(UserRole.ADMIN))):
        return {"message": "Admin access granted"}
"""

from typing import Callable, Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from uuid import UUID
import jwt

from ..database import get_db
from ..models.customer import Customer
from ..models.pending_user import PendingUser
from ..models.user import User, UserStatus
from .jwt import decode_token, decode_invite_token, decode_customer_token
from .roles import UserRole, has_permission


# HTTP Bearer token security scheme
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_subject(decoder: Callable, token: str) -> tuple[UUID, dict]:
    """Decode a token with the given decoder and return (sub, payload).

    Raises:
        HTTPException 401: On expired/invalid tokens or malformed subject
    """
    try:
        payload = decoder(token)

        subject = payload.get("sub")
        if not subject:
            raise _unauthorized("Invalid token: missing subject claim")

        return UUID(subject), payload

    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {str(e)}")
    except ValueError as e:
        raise _unauthorized(f"Invalid token claims: {str(e)}")


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Extract and validate the staff JWT, returning the authenticated user.

    This dependency:
    1. Extracts Bearer token from Authorization header
    2. Validates token signature and expiration
    3. Loads user from database
    4. Rejects RETIRED users (ONLEAVE users may still sign in)

    Raises:
        HTTPException 401: If token is missing, invalid, expired, or user not found
        HTTPException 403: If user status is RETIRED
    """
    user_id, payload = _decode_subject(decode_token, credentials.credentials)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthorized("User not found")

    # Tokens outlive role/company changes; the database row is authoritative
    if str(user.company_id) != payload.get("company_id"):
        raise _unauthorized("Invalid token payload")

    if user.status == UserStatus.RETIRED.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is retired",
        )

    return user


def require_role(required_role: UserRole) -> Callable:
    """Create a dependency that enforces role-based access control.

    Higher roles inherit permissions from lower roles
    (OWNER > ADMIN > EMPLOYEE > GUEST).

    Example:
        @router.post("/department")
        def create_department(
            data: DepartmentCreate,
            user: User = Depends(require_role(UserRole.ADMIN))
        ):
            ...
    """

    def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        try:
            user_role = UserRole(current_user.role)
        except ValueError:
            # Invalid role in database (prevented by CHECK constraint)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Invalid user role: {current_user.role}",
            )

        if not has_permission(user_role, required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role.value}",
            )

        return current_user

    return role_dependency


def get_current_admin(current_user: User = Depends(require_role(UserRole.ADMIN))) -> User:
    """Convenience dependency for ADMIN+ endpoints (OWNER, ADMIN)."""
    return current_user


def get_current_employee(current_user: User = Depends(require_role(UserRole.EMPLOYEE))) -> User:
    """Convenience dependency for write endpoints open to EMPLOYEE and above."""
    return current_user


def get_pending_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> PendingUser:
    """Resolve the PendingUser named by an invitation token.

    Raises:
        HTTPException 401: If the token is not a valid invitation token
        HTTPException 404: If the invitation was already redeemed or revoked
    """
    pending_user_id, payload = _decode_subject(decode_invite_token, credentials.credentials)

    pending_user = db.query(PendingUser).filter(PendingUser.id == pending_user_id).first()
    if not pending_user or str(pending_user.company_id) != payload.get("company_id"):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found or already used",
        )

    return pending_user


def get_current_customer(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Customer:
    """Resolve the end customer named by a customer token.

    The stored customer must still belong to the company and channel the
    token was issued for.

    Raises:
        HTTPException 401: If the token is invalid or no longer matches
    """
    customer_id, payload = _decode_subject(decode_customer_token, credentials.credentials)

    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise _unauthorized("Customer not found")

    if (
        str(customer.company_id) != payload.get("company_id")
        or customer.source != payload.get("source")
    ):
        raise _unauthorized("Invalid token payload")

    return customer


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[User, Depends(get_current_admin)]
CurrentCustomer = Annotated[Customer, Depends(get_current_customer)]
