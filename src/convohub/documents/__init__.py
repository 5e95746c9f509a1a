"""Company document storage endpoints.

Avatar uploads live in the ``avatar_router`` submodule.
"""

from .router import router

__all__ = ["router"]
