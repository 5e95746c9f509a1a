"""Tenancy module - company context for request logs and metrics."""

from .middleware import CompanyContextMiddleware

__all__ = [
    "CompanyContextMiddleware",
]
