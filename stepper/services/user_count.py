"""
stepper/services/user_count.py — Recently active user count
Counts users across every site in the user directory document
(STEPPER_USERS_FILE) whose last activity falls inside the active window.
"""
from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional, Union

from loguru import logger
from pydantic import ValidationError

from stepper.config import get_settings
from stepper.core import logging as app_logging
from stepper.models import StepperSettings, UserRecord, UsersFile
from stepper.services.degrees import ConfigurationError
from stepper.utils.timezone import ensure_utc, utc_now

settings = get_settings()

SUPPORTED_QUERIES = {"users"}


def count_active_users(
    users: Iterable[UserRecord],
    now: datetime,
    window_minutes: int,
) -> int:
    """Users whose last_active is at or after now - window. Never-seen users don't count."""
    cutoff = ensure_utc(now) - timedelta(minutes=window_minutes)
    return sum(
        1
        for user in users
        if user.last_active is not None and ensure_utc(user.last_active) >= cutoff
    )


def load_users(path: Optional[Union[str, Path]] = None) -> UsersFile:
    """Load the user directory. Missing or invalid documents read as empty."""
    target = Path(path) if path is not None else Path(settings.stepper_users_file)
    if not target.exists():
        logger.debug(f"User directory {target} not found. Counting zero users.")
        return UsersFile()

    try:
        data = json.loads(target.read_text(encoding="utf-8"))
        return UsersFile(**(data or {}))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, TypeError) as exc:
        app_logging.log_error("user_count", "load_users", exc, {"path": str(target)})
        return UsersFile()


def get_user_count(
    stepper_settings: StepperSettings,
    path: Optional[Union[str, Path]] = None,
    now: Optional[datetime] = None,
) -> int:
    """Raw count for the metric selected by the stored `query` setting."""
    if stepper_settings.query not in SUPPORTED_QUERIES:
        raise ConfigurationError(
            f"Unsupported query {stepper_settings.query!r}; "
            f"expected one of {sorted(SUPPORTED_QUERIES)}"
        )

    directory = load_users(path)
    return count_active_users(
        directory.users,
        now or utc_now(),
        settings.active_window_minutes,
    )
