"""
stepper/utils/timezone.py — UTC helpers
All activity timestamps are compared in UTC.
"""
from __future__ import annotations

from datetime import datetime

import pytz

UTC = pytz.utc


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if dt.tzinfo is None:
        dt = UTC.localize(dt)
    return dt.astimezone(UTC)
