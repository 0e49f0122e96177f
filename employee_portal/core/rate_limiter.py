"""
Login throttling.

SlowAPI counts attempts per client IP in fixed one-minute windows. Counters
live in memory unless REDIS_URL is set, in which case every instance shares
them.
"""

import logging
import math
import time

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from employee_portal.core.config import settings

logger = logging.getLogger("employee_portal.rate_limiter")


def get_real_client_ip(request: Request) -> str:
    """
    Client address as seen by the first proxy in front of us.

    X-Forwarded-For (first hop) wins over X-Real-IP, which wins over the
    socket peer address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def get_client_identifier(request: Request) -> str:
    """Rate limit key: one bucket per client IP."""
    return f"ip:{get_real_client_ip(request)}"


def _storage_uri() -> str:
    if settings.REDIS_URL:
        # Don't log credentials embedded in the URL
        logger.info(f"Rate limit counters in Redis at {settings.REDIS_URL.rsplit('@', 1)[-1]}")
        return settings.REDIS_URL
    if settings.IS_PRODUCTION:
        logger.warning("Rate limit counters are in process memory; set REDIS_URL when running several instances")
    return "memory://"


storage_uri = _storage_uri()

# Only routes decorated with @limiter.limit(...) are throttled
limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=storage_uri,
    strategy="fixed-window",
    headers_enabled=True,
    enabled=settings.RATE_LIMIT_ENABLED,
)


class RateLimits:
    AUTH_LOGIN = settings.LOGIN_RATE_LIMIT


def seconds_until_reset(request: Request, exc: RateLimitExceeded) -> int:
    """
    Time left in the client's current window.

    Uses the window slowapi just evaluated for this request; falls back to the
    full window length of the exceeded limit.
    """
    current = getattr(request.state, "view_rate_limit", None)
    if current is not None:
        item, keys = current
        reset_at, _remaining = limiter.limiter.get_window_stats(item, *keys)
        return max(1, math.ceil(reset_at - time.time()))
    return int(exc.limit.limit.get_expiry())


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = seconds_until_reset(request, exc)
    logger.warning(
        f"Throttled {get_client_identifier(request)} on {request.method} {request.url.path} "
        f"(retry in {retry_after}s)"
    )
    return JSONResponse(
        status_code=429,
        content={"message": "Too Many Attempts.", "retry_after": retry_after},
        headers={"Retry-After": str(retry_after)},
    )
