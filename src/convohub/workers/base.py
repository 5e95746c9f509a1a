"""Base utilities for multi-tenant background tasks.

Tenant isolation rules for Celery tasks:
- company_id is always passed explicitly as a UUID string
- it is validated against the companies table before processing
- the company check opens and closes its own SessionLocal

Enqueueing pattern:

    @router.patch("/{filename}/status")
    def change_status(..., current_user: User = Depends(get_current_admin)):
        mark_sync_status.delay(
            company_id=str(current_user.company_id),  # from the JWT, never the body
            filename=filename,
            target_status="SYNCED",
        )
"""

from uuid import UUID

from celery import Task

from ..database import SessionLocal
from ..models.company import Company


def validate_company_id(company_id: str) -> UUID:
    """Validate that company_id is a UUID referencing an existing company.

    Raises:
        ValueError: If company_id is malformed or the company doesn't exist
    """
    try:
        company_uuid = UUID(company_id)
    except (ValueError, AttributeError, TypeError) as e:
        raise ValueError(f"Invalid company_id format '{company_id}': {str(e)}")

    session = SessionLocal()
    try:
        company = session.query(Company).filter(Company.id == company_uuid).first()
        if not company:
            raise ValueError(f"Company {company_id} does not exist")
    finally:
        session.close()

    return company_uuid


class BaseTask(Task):
    """Celery task base class that validates company_id before running.

    Tasks using this base must receive company_id as a keyword argument.
    """

    def __call__(self, *args, **kwargs):
        company_id = kwargs.get("company_id")

        if not company_id:
            raise ValueError(
                "company_id parameter is required for all multi-tenant tasks. "
                "Ensure you pass company_id=str(company_uuid) when enqueuing the task."
            )

        validate_company_id(company_id)

        return super().__call__(*args, **kwargs)
