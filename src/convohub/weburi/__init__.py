"""Web URI knowledge sources."""

from .router import router

__all__ = ["router"]
