"""
Request throttling with slowapi.

Two tiers, both configurable:
- settings.rate_limit_default for reads (listings, threads, stats)
- settings.rate_limit_write for writes (reviews, reactions, ratings,
  purchases, admin edits)

Authenticated callers are counted per login, so buyers behind one proxy
don't share a budget; anonymous callers are counted per client IP.
Set RATE_LIMIT_ENABLED=false to turn throttling off.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookstore.config import get_settings
from bookstore.services.security import login_from_token

logger = logging.getLogger(__name__)
settings = get_settings()

RETRY_AFTER_SECONDS = 60


def client_address(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return get_remote_address(request)


def rate_limit_key(request: Request) -> str:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        login = login_from_token(token)
        if login is not None:
            return f"user:{login}"
    return f"ip:{client_address(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[settings.rate_limit_default],
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same body shape as the other API errors."""
    logger.warning(f"Throttled {rate_limit_key(request)} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content={"error": "rate_limited", "detail": f"Too many requests ({exc.detail})"},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )
