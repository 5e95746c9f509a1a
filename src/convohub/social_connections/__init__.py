"""Third-party platform connections."""

from .router import router

__all__ = ["router"]
