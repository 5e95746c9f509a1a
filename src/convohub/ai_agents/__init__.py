"""AI agent configuration endpoints."""

from .router import router

__all__ = ["router"]
