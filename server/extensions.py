"""
Flask extensions for the EV charge tracker.

Initialized here without an app so blueprints can import them without
circular imports; ``create_app`` binds them.
"""

import os

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Rate limiting storage (Redis in production, memory for development)
RATE_LIMIT_STORAGE = os.environ.get("RATE_LIMIT_STORAGE_URI", "memory://")

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=RATE_LIMIT_STORAGE,
    strategy="fixed-window",
    headers_enabled=True,  # Return X-RateLimit-* headers
)


class RateLimits:
    """Rate limit configurations for different endpoint types."""

    # Record creation (charges, vehicles, preferences)
    WRITE_MODERATE = "100 per hour"

    # Account registration
    REGISTRATION = "10 per minute"
