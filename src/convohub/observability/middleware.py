"""FastAPI middleware for observability.

Assigns a request ID to every HTTP request, logs start and completion,
and records request count and latency metrics.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import resolve_request_id, set_request_id
from .logging_config import get_logger
from .metrics import http_requests_total, http_request_duration_seconds

logger = get_logger(__name__)


def _route_template(request: Request) -> str:
    """Route path template (e.g. /api/v1/shift/{shift_id}) to keep label cardinality low."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and inject request IDs."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        set_request_id(request_id)

        start_time = time.perf_counter()
        logger.info(
            f"{request.method} {request.url.path}",
            extra={"method": request.method, "path": request.url.path}
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {str(e)}",
                extra={"path": request.url.path, "duration_ms": round(duration_ms, 2)},
                exc_info=True
            )
            raise

        duration = time.perf_counter() - start_time
        route = _route_template(request)
        http_requests_total.labels(request.method, route, str(response.status_code)).inc()
        http_request_duration_seconds.labels(request.method, route).observe(duration)

        logger.info(
            f"Request completed: {response.status_code}",
            extra={
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
                "company_id": getattr(request.state, "company_id", None),
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response
