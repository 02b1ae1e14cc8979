"""
Shared request rate limiter.

Every router decorates its endpoints with this single slowapi limiter so that
limits can be switched off in one place (RATE_LIMIT_ENABLED).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from obsdesk.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)

DEFAULT_LIMIT = f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW}seconds"
WRITE_LIMIT = "30/minute"
SIGN_IN_LIMIT = "5/minute"
