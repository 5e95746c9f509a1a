"""Background workers for ConvoHub.

Every tenant task takes company_id as an explicit string argument and
validates it before touching data (see base.BaseTask).
"""

from .celery_app import celery_app
from .base import (
    validate_company_id,
    BaseTask,
)

__all__ = [
    "celery_app",
    "validate_company_id",
    "BaseTask",
]
