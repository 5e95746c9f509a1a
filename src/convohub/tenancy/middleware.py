"""Middleware for company context extraction.

Extracts company_id from the staff bearer token for cross-cutting concerns
(log correlation, metrics labels). Authentication itself happens in the
get_current_user dependency.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from uuid import UUID
import jwt

from ..auth.jwt import decode_token


class CompanyContextMiddleware(BaseHTTPMiddleware):
    """Attach company_id to request.state.

    This middleware:
    1. Extracts Bearer token from Authorization header
    2. Decodes JWT and extracts company_id claim
    3. Attaches company_id to request.state
    4. Handles missing/invalid tokens gracefully (sets None)

    The middleware does NOT reject requests.

    Usage:
        app.add_middleware(CompanyContextMiddleware)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.company_id = None

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return await call_next(request)

        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return await call_next(request)

        try:
            payload = decode_token(parts[1])
            company_id_str = payload.get("company_id")

            if company_id_str:
                request.state.company_id = UUID(company_id_str)

        except (jwt.InvalidTokenError, ValueError):
            # Rejected later by get_current_user where authentication is required
            pass

        return await call_next(request)

