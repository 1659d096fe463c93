"""
stepper/config.py — Pydantic BaseSettings configuration
Process-level settings only. The indicator's own settings (key, ip, max)
live in the stored settings document, see stepper/clients/settings_store.py.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8000

    # ── Admin authentication (settings endpoints) ─────────────────────────────
    admin_user: str = "admin"
    admin_pass: str = "change-me-immediately"

    # ── Storage documents ─────────────────────────────────────────────────────
    stepper_settings_file: str = "data/stepper.json"
    stepper_users_file: str = "data/users.json"

    # ── Active user query ─────────────────────────────────────────────────────
    # A user counts as active if last seen within this many minutes
    active_window_minutes: int = 15

    @field_validator("environment")
    @classmethod
    def validate_env(cls, v: str) -> str:
        allowed = {"development", "production", "testing"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("active_window_minutes")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("active_window_minutes must be positive")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance. Use this everywhere."""
    return Settings()
