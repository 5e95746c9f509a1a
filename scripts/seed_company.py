#!/usr/bin/env python
"""Seed script to create a company and its OWNER account.

Intended for local development and first deployments; further staff are
invited through the API.

Usage:
    python scripts/seed_company.py

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    PASSWORD_PEPPER: Password hashing pepper (required)
    COMPANY_NAME: Company name (default: Demo Company)
    COMPANY_SUBDOMAIN: Subdomain (default: demo)
    OWNER_EMAIL: Email for the owner (default: owner@example.com)
    OWNER_PASSWORD: Password for the owner (default: OwnerPass123)
    OWNER_NAME: Display name for the owner (default: Owner)
"""

import os
import sys

from sqlalchemy.exc import SQLAlchemyError

from convohub.auth.password import hash_password, validate_password_strength
from convohub.database import get_db_session, init_db
from convohub.models.company import Company, CompanyStatus
from convohub.models.user import User


def main():
    """Create the company and its owner."""
    company_name = os.getenv("COMPANY_NAME", "Demo Company")
    subdomain = os.getenv("COMPANY_SUBDOMAIN", "demo")
    owner_email = os.getenv("OWNER_EMAIL", "owner@example.com").lower()
    owner_password = os.getenv("OWNER_PASSWORD", "OwnerPass123")
    owner_name = os.getenv("OWNER_NAME", "Owner")

    is_valid, error_msg = validate_password_strength(owner_password)
    if not is_valid:
        print(f"ERROR: Password does not meet strength requirements: {error_msg}")
        sys.exit(1)

    init_db()

    try:
        with get_db_session() as session:
            if session.query(User).filter(User.email == owner_email).first():
                print(f"ERROR: User with email {owner_email} already exists")
                sys.exit(1)

            if session.query(Company).filter(Company.subdomain == subdomain).first():
                print(f"ERROR: Company with subdomain {subdomain} already exists")
                sys.exit(1)

            company = Company(
                company_name=company_name,
                subdomain=subdomain,
                status=CompanyStatus.ACTIVE.value,
            )
            session.add(company)
            session.flush()

            owner = User(
                company_id=company.id,
                user_name=owner_name,
                email=owner_email,
                password_hash=hash_password(owner_password),
                role="OWNER",
            )
            session.add(owner)
            session.flush()

            print("SUCCESS: Company and owner created")
            print(f"  Company: {company.id} ({company.company_name}, {company.subdomain})")
            print(f"  Owner:   {owner.id} ({owner.email})")
    except SQLAlchemyError as e:
        print(f"ERROR: Failed to seed company: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
