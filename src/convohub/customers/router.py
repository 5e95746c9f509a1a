"""Customer endpoints.

Customers are the end users chatting with a company through the web
widget or a social channel. They authenticate with customer tokens that
are separate from staff tokens; staff can list a company's customers.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.dependencies import CurrentCustomer
from ..auth.jwt import create_customer_token
from ..auth.password import hash_password, verify_password
from ..database import get_db
from ..dependencies import TenantQuery, get_company_id
from ..models.company import Company
from ..models.customer import Customer
from .schemas import (
    CustomerAuthResponse,
    CustomerDeleteResponse,
    CustomerLoginRequest,
    CustomerRegisterRequest,
    CustomerResponse,
    CustomerUpdateRequest,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customer", tags=["Customers"])

DUPLICATE_CUSTOMER = "Customer already exists with this contact and source for the company"


def _auth_response(customer: Customer) -> CustomerAuthResponse:
    token = create_customer_token(
        customer_id=customer.id,
        company_id=customer.company_id,
        source=customer.source,
        contact=customer.contact,
    )
    return CustomerAuthResponse(access_token=token, customer=CustomerResponse.model_validate(customer))


def _find_customer(db: Session, company_id: UUID, contact: str, source: str):
    return TenantQuery.scoped_query(db, Customer, company_id).filter(
        Customer.contact == contact,
        Customer.source == source,
    ).first()


@router.post("/register", response_model=CustomerAuthResponse, status_code=status.HTTP_201_CREATED)
def register_customer(data: CustomerRegisterRequest, db: Session = Depends(get_db)):
    """Register a customer for a company and channel (public).

    Raises:
        HTTPException 404: Company not found
        HTTPException 409: Customer with this contact and source already exists
    """
    if not db.query(Company).filter(Company.id == data.company_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

    contact = data.contact.strip()
    if _find_customer(db, data.company_id, contact, data.source.value):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_CUSTOMER)

    customer = Customer(
        company_id=data.company_id,
        name=data.name,
        contact=contact,
        password_hash=hash_password(data.password),
        source=data.source.value,
        profile_uri=data.profile_uri,
        conversation_count=0,
    )
    db.add(customer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_CUSTOMER)

    db.refresh(customer)
    logger.info("Customer registered", extra={"company_id": str(customer.company_id), "customer_id": str(customer.id)})
    return _auth_response(customer)


@router.post("/login", response_model=CustomerAuthResponse)
def login_customer(data: CustomerLoginRequest, db: Session = Depends(get_db)):
    """Authenticate a customer (public).

    Raises:
        HTTPException 401: Unknown customer or wrong password
    """
    customer = _find_customer(db, data.company_id, data.contact.strip(), data.source.value)
    if not customer or not verify_password(data.password, customer.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return _auth_response(customer)


@router.get("/profile", response_model=CustomerResponse)
def get_customer_profile(customer: CurrentCustomer):
    return customer


@router.patch("/update", response_model=CustomerResponse)
def update_customer(
    data: CustomerUpdateRequest,
    customer: CurrentCustomer,
    db: Session = Depends(get_db),
):
    """Update the authenticated customer's name, profile picture or password."""
    changes = data.model_dump(exclude_unset=True)

    if changes.get("name"):
        customer.name = changes["name"]
    if "profile_uri" in changes:
        customer.profile_uri = changes["profile_uri"]
    if changes.get("password"):
        customer.password_hash = hash_password(changes["password"])

    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/delete", response_model=CustomerDeleteResponse)
def delete_customer(customer: CurrentCustomer, db: Session = Depends(get_db)):
    """Delete the authenticated customer's account."""
    customer_id = customer.id
    db.delete(customer)
    db.commit()

    logger.info("Customer deleted", extra={"customer_id": str(customer_id)})
    return CustomerDeleteResponse(id=customer_id)


@router.get("", response_model=List[CustomerResponse])
def list_customers(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    """List the company's customers, newest first (staff)."""
    return (
        TenantQuery.scoped_query(db, Customer, company_id)
        .order_by(Customer.created_at.desc())
        .all()
    )
