"""
Slowapi-based rate limiting.

Only the credential endpoints (register, login) carry a limit; it can be
switched off with RATE_LIMIT_ENABLED=false.
"""
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
import logging

from config import settings

logger = logging.getLogger(__name__)


def get_request_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Priority:
    1. Auth token header (for clients that already hold a session)
    2. IP address (fallback)
    """
    token = request.headers.get("X-Auth-Token")
    if token:
        return f"token:{token}"

    return get_remote_address(request)


def create_limiter(enabled: bool = True) -> Limiter:
    """
    Create and configure slowapi Limiter.

    Uses in-memory storage, which is enough for a single instance.
    """
    limiter = Limiter(
        key_func=get_request_identifier,
        headers_enabled=True,
        enabled=enabled,
    )
    if not enabled:
        logger.info("Rate limiting disabled")
    return limiter


limiter = create_limiter(settings.rate_limit_enabled)


def setup_rate_limiting(app):
    """Attach the shared limiter and its 429 handler to the app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    logger.info("Slowapi rate limiting configured")
    return limiter
