"""Rate limiting for authentication endpoints.

Implements sliding window rate limiting to slow down credential stuffing
against staff and customer logins. Uses Redis so limits are shared across
API instances; without Redis, limiting is disabled.
"""

import hashlib
import logging
import os
import time
from typing import Optional

from fastapi import HTTPException, Request, status
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


def _get_int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_redis_client() -> Optional[Redis]:
    """Get Redis client for rate limiting.

    Returns None if Redis is not available, allowing graceful degradation.
    """
    redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    try:
        client = Redis.from_url(redis_url, decode_responses=True, socket_connect_timeout=1)
        client.ping()
        return client
    except (RedisError, OSError):
        logger.warning("Redis unavailable, login rate limiting disabled")
        return None


def _get_client_identifier(request: Request) -> str:
    """Hash of client IP and User-Agent used as rate limit subject."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client:
        ip = request.client.host
    else:
        ip = "unknown"

    user_agent = request.headers.get("User-Agent", "")

    fingerprint = f"{ip}:{user_agent}"
    return hashlib.sha256(fingerprint.encode()).hexdigest()[:32]


def _get_rate_limit_key(identifier: str, endpoint: str) -> str:
    return f"rate_limit:{endpoint}:{identifier}"


def _get_lockout_key(identifier: str) -> str:
    return f"lockout:{identifier}"


def _get_failed_attempts_key(account: str) -> str:
    return f"failed_attempts:{hashlib.sha256(account.lower().encode()).hexdigest()[:32]}"


class RateLimiter:
    """Rate limiter using Redis sliding window algorithm.

    The Redis connection is opened on first use so importing the app never
    blocks on an unreachable Redis.
    """

    def __init__(self):
        self._redis: Optional[Redis] = None
        self._connected = False
        self.window_seconds = _get_int_env("LOGIN_RATE_LIMIT_WINDOW_SECONDS", 60)
        self.max_attempts = _get_int_env("LOGIN_RATE_LIMIT_ATTEMPTS", 5)
        self.lockout_threshold = _get_int_env("LOGIN_LOCKOUT_THRESHOLD", 10)
        self.lockout_seconds = _get_int_env("LOGIN_LOCKOUT_DURATION_SECONDS", 900)

    @property
    def redis(self) -> Optional[Redis]:
        if not self._connected:
            self._redis = get_redis_client()
            self._connected = True
        return self._redis

    def reset(self) -> None:
        """Drop all rate limiting keys (used by tests and ops scripts)."""
        if not self.redis:
            return
        keys = []
        for pattern in ("rate_limit:*", "lockout:*", "failed_attempts:*"):
            keys += self.redis.keys(pattern)
        if keys:
            self.redis.delete(*keys)

    def is_rate_limited(self, request: Request, endpoint: str = "auth") -> bool:
        """Check if client exceeded max_attempts within the window."""
        if not self.redis:
            return False

        key = _get_rate_limit_key(_get_client_identifier(request), endpoint)
        window_start = time.time() - self.window_seconds

        self.redis.zremrangebyscore(key, 0, window_start)
        return self.redis.zcard(key) >= self.max_attempts

    def record_attempt(self, request: Request, endpoint: str = "auth") -> int:
        """Record an attempt and return the count in the current window."""
        if not self.redis:
            return 0

        key = _get_rate_limit_key(_get_client_identifier(request), endpoint)
        now = time.time()

        self.redis.zadd(key, {f"{now:.6f}": now})
        self.redis.expire(key, self.window_seconds)
        return self.redis.zcard(key)

    def is_locked_out(self, request: Request) -> bool:
        if not self.redis:
            return False
        return self.redis.exists(_get_lockout_key(_get_client_identifier(request))) > 0

    def get_lockout_remaining(self, request: Request) -> int:
        """Seconds remaining in lockout, or 0 if not locked out."""
        if not self.redis:
            return 0
        ttl = self.redis.ttl(_get_lockout_key(_get_client_identifier(request)))
        return max(0, ttl)

    def record_failed_login(self, account: str, request: Request) -> bool:
        """Record a failed login for an account (email or contact).

        Returns:
            True if the client is now locked out
        """
        if not self.redis:
            return False

        account_key = _get_failed_attempts_key(account)
        attempts = self.redis.incr(account_key)
        self.redis.expire(account_key, self.window_seconds)

        if attempts >= self.lockout_threshold:
            lockout_key = _get_lockout_key(_get_client_identifier(request))
            self.redis.setex(lockout_key, self.lockout_seconds, "1")
            logger.warning("Login lockout triggered", extra={"attempts": attempts})
            return True

        return False

    def clear_failed_attempts(self, account: str) -> None:
        """Clear failed login attempts after successful login."""
        if not self.redis:
            return
        self.redis.delete(_get_failed_attempts_key(account))


# Global rate limiter instance
rate_limiter = RateLimiter()


def check_rate_limit(request: Request) -> None:
    """Check rate limit and raise 429 if exceeded.

    Use as a dependency on login endpoints:

        @router.post("/login")
        def login(request: Request, _: None = Depends(check_rate_limit)):
            ...
    """
    if rate_limiter.is_locked_out(request):
        remaining = rate_limiter.get_lockout_remaining(request)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many failed attempts. Account locked for {remaining} seconds.",
            headers={"Retry-After": str(remaining)}
        )

    if rate_limiter.is_rate_limited(request, "auth"):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please wait before trying again.",
            headers={"Retry-After": str(rate_limiter.window_seconds)}
        )

    rate_limiter.record_attempt(request, "auth")
