"""Customer endpoints (public signup/login, customer self-service, staff listing)."""

from .router import router

__all__ = ["router"]
