"""
stepper/core/auth.py — Admin authentication
HTTP Basic Auth for the settings endpoints. The stepper endpoint itself is
guarded by core/access_gate.py instead.
"""
from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from stepper.config import get_settings

security = HTTPBasic(auto_error=False)
settings = get_settings()


async def verify_basic_auth(
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
) -> bool:
    """Validate HTTP Basic Auth credentials for admin endpoints."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Basic Auth credentials required",
            headers={"WWW-Authenticate": "Basic"},
        )
    correct_username = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        settings.admin_user.encode("utf-8"),
    )
    correct_password = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        settings.admin_pass.encode("utf-8"),
    )
    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return True
