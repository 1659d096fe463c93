"""
tests/conftest.py — Shared pytest fixtures
"""
from __future__ import annotations

import json
import os
from datetime import timedelta

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("ADMIN_USER", "operator")
os.environ.setdefault("ADMIN_PASS", "s3cret-pass")

import pytest
from fastapi.testclient import TestClient

from stepper.config import get_settings
from stepper.core.rate_limiter import limiter
from stepper.models import StepperSettings, UserRecord
from stepper.utils.timezone import utc_now


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Point both storage documents at a per-test directory."""
    settings = get_settings()
    monkeypatch.setattr(settings, "stepper_settings_file", str(tmp_path / "stepper.json"))
    monkeypatch.setattr(settings, "stepper_users_file", str(tmp_path / "users.json"))
    monkeypatch.setattr(settings, "active_window_minutes", 15)
    limiter.reset()
    return tmp_path


@pytest.fixture
def write_stepper_settings(isolated_storage):
    def _write(data) -> None:
        path = isolated_storage / "stepper.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return _write


@pytest.fixture
def write_users(isolated_storage):
    """Write a user directory; each entry is minutes since last activity (None = never)."""
    def _write(minutes_ago: list) -> None:
        now = utc_now()
        users = [
            {
                "user_id": f"user-{i}",
                "site_id": 1 + i % 3,
                "last_active": (now - timedelta(minutes=m)).isoformat() if m is not None else None,
            }
            for i, m in enumerate(minutes_ago)
        ]
        (isolated_storage / "users.json").write_text(json.dumps({"users": users}), encoding="utf-8")
    return _write


@pytest.fixture
def keyed_settings() -> StepperSettings:
    return StepperSettings(key="abc", ip=None, max=100)


@pytest.fixture
def sample_users() -> list[UserRecord]:
    now = utc_now()
    return [
        UserRecord(user_id="a", last_active=now - timedelta(minutes=1)),
        UserRecord(user_id="b", last_active=now - timedelta(minutes=14)),
        UserRecord(user_id="c", last_active=now - timedelta(minutes=30)),
        UserRecord(user_id="d", last_active=None),
    ]


@pytest.fixture
def client():
    from stepper.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_auth() -> tuple[str, str]:
    settings = get_settings()
    return (settings.admin_user, settings.admin_pass)
