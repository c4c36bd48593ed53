"""
Rate limiting configuration.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from recipebox.core.config import settings


def get_user_identifier(request: Request) -> str:
    """
    Get user identifier for rate limiting.
    Uses user ID if authenticated, otherwise uses IP address.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.id}"

    return get_remote_address(request)


# Create limiter instance
limiter = Limiter(key_func=get_user_identifier, default_limits=[settings.DEFAULT_RATE_LIMIT])

# Rate limit configurations
# Format: "count/period" where period can be second(s), minute(s), hour(s), day(s)
AUTH_LIMIT = "5/minute"  # Login/register endpoints
SEARCH_LIMIT = "60/minute"  # Search, suggestions and popular tags
WRITE_LIMIT = "30/minute"  # Recipe and tag writes
