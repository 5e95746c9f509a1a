"""Meta (Facebook) OAuth and Graph API proxy."""

from .router import router

__all__ = ["router"]
