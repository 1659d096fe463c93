"""
stepper/core/rate_limiter.py — slowapi rate limiting configuration
"""
from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

# Single shared limiter instance — imported by main.py and routers
limiter = Limiter(key_func=get_remote_address)

# ── Rate limits per endpoint category ────────────────────────────────────────
# These string values are used as decorators on individual route handlers.

RATE_LIMITS = {
    # Indicator device polling: a device polls every few seconds at most
    "stepper": "120/minute",
    # Admin settings read/write
    "admin": "30/minute",
    # Health check
    "health": "30/minute",
}
