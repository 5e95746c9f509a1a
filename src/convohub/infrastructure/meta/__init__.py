"""Meta (Facebook) Graph API client."""

from .graph_client import MetaGraphClient, MetaGraphError, TOKEN_EXPIRED_CODE

__all__ = ["MetaGraphClient", "MetaGraphError", "TOKEN_EXPIRED_CODE"]
