"""Request ID management for request correlation.

The current request ID lives in a ContextVar so log records emitted anywhere
during a request (including threadpool-run sync endpoints) can carry it.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Incoming IDs are echoed into logs and headers, so only accept tame values
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def generate_request_id() -> str:
    return str(uuid.uuid4())


def resolve_request_id(incoming: Optional[str]) -> str:
    """Reuse a caller-supplied X-Request-ID when well-formed, else generate one."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return generate_request_id()


def get_request_id() -> str:
    """Current request ID or "no-request-id" outside a request."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: Optional[str]) -> None:
    request_id_var.set(request_id)
