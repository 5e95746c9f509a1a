"""Staff user endpoints: invitations, registration and profiles."""

from .router import router

__all__ = ["router"]
