"""Rate limiting for the credential-accepting endpoints.

Limits are keyed on client IP and stored in process memory. Disabled in the
testing environment.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.gatekeeper.core.config import get_settings
from src.gatekeeper.core.logging import get_logger

logger = get_logger(__name__)

LOGIN_LIMIT = "10/minute"
TWO_FACTOR_LIMIT = "10/minute"
REFRESH_LIMIT = "30/minute"
ACCOUNT_EMAIL_LIMIT = "5/minute"


def get_rate_limit_key(request: Request) -> str:
    """Generate rate limit key from client IP only.

    Do NOT include user-controlled values (tenant slug, email) in the key:
    rotating them would create unlimited new buckets and bypass the limit.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; reconfiguration needs a restart
limiter = create_limiter()
