"""Health check utilities for ConvoHub.

Provides health and readiness checks for infrastructure components.
The database is required; Redis and document storage degrade the service
without taking it down.
"""

import os
import time
from enum import Enum
from typing import Dict, Optional
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import redis
from redis.exceptions import RedisError

from ..infrastructure.storage.storage_config import build_document_storage
from ..infrastructure.storage.errors import StorageError
from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None
    required: bool = True


def check_database_health(db: Session) -> ComponentHealth:
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000

        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Database connection OK",
            latency_ms=round(latency_ms, 2)
        )
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Database error: {str(e)}"
        )


def check_redis_health() -> ComponentHealth:
    """Redis backs login rate limiting and the Celery broker."""
    try:
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        client = redis.from_url(redis_url, decode_responses=True, socket_connect_timeout=1)

        start = time.perf_counter()
        client.ping()
        latency_ms = (time.perf_counter() - start) * 1000

        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Redis connection OK",
            latency_ms=round(latency_ms, 2),
            required=False,
        )
    except (RedisError, OSError) as e:
        logger.warning(f"Redis health check failed: {e}")
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Redis error: {str(e)}",
            required=False,
        )


def check_document_storage_health() -> ComponentHealth:
    """Check the configured document storage backend (local folder or S3)."""
    try:
        storage = build_document_storage()

        start = time.perf_counter()
        storage.check_health()
        latency_ms = (time.perf_counter() - start) * 1000

        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Document storage OK",
            latency_ms=round(latency_ms, 2),
            required=False,
        )
    except (StorageError, ValueError) as e:
        logger.warning(f"Document storage health check failed: {e}")
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Document storage error: {str(e)}",
            required=False,
        )


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Unhealthy if a required component is down, degraded if an optional one is."""
    if all(c.status == HealthStatus.HEALTHY for c in components.values()):
        return HealthStatus.HEALTHY

    if any(c.status == HealthStatus.UNHEALTHY and c.required for c in components.values()):
        return HealthStatus.UNHEALTHY

    return HealthStatus.DEGRADED
