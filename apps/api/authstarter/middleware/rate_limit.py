from __future__ import annotations

import time
from dataclasses import dataclass

from fastapi import Request
from redis import Redis
from redis.connection import ConnectionPool
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from authstarter.api.errors import error_body
from authstarter.core.config import settings

AUTH_PATH_PREFIX = "/v1/auth/"

_WINDOWS = {
    "sec": 1,
    "second": 1,
    "seconds": 1,
    "min": 60,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}

_pool: ConnectionPool | None = None


def get_redis() -> Redis:
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(settings.redis_url, decode_responses=True)
    return Redis(connection_pool=_pool)


@dataclass(frozen=True)
class Rate:
    limit: int
    window_seconds: int


def parse_rate(rate: str) -> Rate:
    """Parse ``"<count>/<window>"`` such as ``"10/minute"`` or ``"120/hour"``."""
    count, sep, window = rate.strip().lower().partition("/")
    if not sep:
        raise ValueError(f"Invalid rate format: {rate}")
    seconds = _WINDOWS.get(window.strip())
    if seconds is None:
        raise ValueError(f"Invalid rate window: {window}")
    return Rate(limit=int(count), window_seconds=seconds)


def rate_for_path(path: str) -> str:
    if path.startswith(AUTH_PATH_PREFIX):
        return settings.rate_limit_auth
    return settings.rate_limit_default


def _is_exempt(request: Request) -> bool:
    return request.method == "OPTIONS" or request.url.path in settings.rate_limit_exempt_paths


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window counter per client IP, method and path, kept in Redis.

    Misconfiguration and Redis outages fail open.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.rate_limit_enabled or _is_exempt(request):
            return await call_next(request)

        path = request.url.path
        try:
            rate = parse_rate(rate_for_path(path))
        except ValueError:
            return await call_next(request)

        now = int(time.time())
        bucket = now // rate.window_seconds
        client_ip = request.client.host if request.client else "unknown"
        key = f"rl:{client_ip}:{request.method}:{path}:{rate.window_seconds}:{bucket}"

        try:
            redis = get_redis()
            count = int(redis.incr(key))
            if count == 1:
                redis.expire(key, rate.window_seconds)
        except RedisError:
            return await call_next(request)

        reset_at = (bucket + 1) * rate.window_seconds
        headers = {
            "X-RateLimit-Limit": str(rate.limit),
            "X-RateLimit-Remaining": str(max(0, rate.limit - count)),
            "X-RateLimit-Reset": str(reset_at),
        }

        if count > rate.limit:
            headers["Retry-After"] = str(max(0, reset_at - now))
            return JSONResponse(
                status_code=429,
                content=error_body("RATE_LIMITED", "Too many requests, try again later"),
                headers=headers,
            )

        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
