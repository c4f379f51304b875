"""Shared rate limiter."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from authgate.config import get_settings

settings = get_settings()

# Routes without their own @limiter.limit fall back to the default limit via SlowAPIMiddleware.
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT])
