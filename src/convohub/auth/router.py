"""Authentication endpoints for ConvoHub API

Provides company signup, staff login and current user information.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.company import Company, CompanyStatus
from ..models.user import User, UserStatus
from ..audit.service import log_from_request
from .schemas import LoginRequest, LoginResponse, MeResponse, SignupRequest, UserResponse
from .password import hash_password, verify_password, validate_password_strength
from .jwt import create_access_token, _get_jwt_expiry_minutes
from .dependencies import CurrentUser
from .rate_limit import check_rate_limit, rate_limiter
from .roles import UserRole


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_response(user: User) -> LoginResponse:
    access_token = create_access_token(
        user_id=user.id,
        company_id=user.company_id,
        role=user.role,
        email=user.email
    )
    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=_get_jwt_expiry_minutes() * 60
    )


@router.post("/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def signup(
    data: SignupRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new company and its OWNER account.

    The company starts in PENDING status; its owner can sign in and
    configure it right away.

    Raises:
        HTTPException: 400 if the password is too weak
        HTTPException: 409 if company name, subdomain or email is taken
    """
    is_valid, error_message = validate_password_strength(data.password)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)

    if db.query(Company).filter(Company.company_name == data.company_name.strip()).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Company name already exists")

    if db.query(Company).filter(Company.subdomain == data.subdomain).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subdomain already exists")

    if db.query(User).filter(func.lower(User.email) == data.email.lower()).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered as a user")

    company = Company(
        company_name=data.company_name,
        subdomain=data.subdomain,
        company_category=data.company_category,
        country=data.country,
        language=data.language,
        timezone=data.timezone,
        status=CompanyStatus.PENDING.value,
    )
    owner = User(
        company=company,
        user_name=data.user_name,
        email=data.email,
        password_hash=hash_password(data.password),
        role=UserRole.OWNER.value,
        status=UserStatus.ACTIVE.value,
    )

    try:
        db.add(company)
        db.add(owner)
        db.flush()

        log_from_request(
            db=db,
            request=request,
            company_id=company.id,
            action="COMPANY_CREATED",
            actor_id=owner.id,
            entity_type="company",
            entity_id=company.id,
            metadata={"subdomain": company.subdomain, "owner_email": owner.email}
        )

        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Company or user already exists"
        )

    db.refresh(owner)
    logger.info("Company signed up", extra={"company_id": str(company.id)})

    return _token_response(owner)


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    _: None = Depends(check_rate_limit)
):
    """Authenticate a staff user and return a JWT access token.

    Security measures:
    - Rate limiting and lockout (Redis, when available)
    - Failed logins for known accounts are written to the audit log
    - RETIRED accounts are rejected; ONLEAVE accounts may sign in
    - last_login_at is updated on successful login

    Raises:
        HTTPException: 401 if credentials are invalid or account is retired
        HTTPException: 429 if rate limit exceeded or client locked out
    """
    user = db.query(User).filter(func.lower(User.email) == credentials.email.lower()).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        if user:
            log_from_request(
                db=db,
                request=request,
                company_id=user.company_id,
                action="LOGIN_FAILED",
                actor_id=user.id,
                metadata={"email": credentials.email, "reason": "invalid_credentials"}
            )
            db.commit()

        rate_limiter.record_failed_login(credentials.email, request)

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"  # Generic message to prevent enumeration
        )

    if user.status == UserStatus.RETIRED.value:
        log_from_request(
            db=db,
            request=request,
            company_id=user.company_id,
            action="LOGIN_FAILED",
            actor_id=user.id,
            metadata={"email": credentials.email, "reason": "account_retired"}
        )
        db.commit()

        rate_limiter.record_failed_login(credentials.email, request)

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is retired"
        )

    user.last_login_at = datetime.now(timezone.utc)
    rate_limiter.clear_failed_attempts(credentials.email)

    log_from_request(
        db=db,
        request=request,
        company_id=user.company_id,
        action="LOGIN_SUCCESS",
        actor_id=user.id,
        metadata={"email": credentials.email}
    )
    db.commit()
    db.refresh(user)

    return _token_response(user)


@router.get("/me", response_model=MeResponse)
def get_me(current_user: CurrentUser):
    """Get current authenticated user information."""
    return MeResponse(
        user=UserResponse.model_validate(current_user)
    )
