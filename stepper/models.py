"""
stepper/models.py — Pydantic data schemas
Stored settings document, user directory document, and API payloads.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ──────────────────────────────────────────────────────────────────────────────
# Stored stepper settings — the "stepper" settings document
# ──────────────────────────────────────────────────────────────────────────────

class StepperSettings(BaseModel):
    # Unknown keys (blog_id, form_id, ...) survive a save/load round-trip
    model_config = ConfigDict(extra="allow")

    key: Optional[str] = None
    ip: Optional[str] = None
    # Kept raw; parsed strictly by services.degrees.parse_max_scale
    max: Any = 100
    query: str = "users"


# ──────────────────────────────────────────────────────────────────────────────
# User directory — source of the active user count
# ──────────────────────────────────────────────────────────────────────────────

class UserRecord(BaseModel):
    user_id: str
    site_id: int = 1
    last_active: Optional[datetime] = None


class UsersFile(BaseModel):
    schema_version: str = "1.0"
    users: list[UserRecord] = Field(default_factory=list)


# ──────────────────────────────────────────────────────────────────────────────
# API payloads
# ──────────────────────────────────────────────────────────────────────────────

class CountResponse(BaseModel):
    count: int = Field(ge=0, le=359)

    def render(self) -> str:
        """Compact wire form: {"count":N} with no whitespace."""
        return self.model_dump_json()


class HealthResponse(BaseModel):
    status: str
    checks: dict[str, Any]
    timestamp: str
