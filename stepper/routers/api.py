"""
stepper/routers/api.py — Health endpoints
Endpoints: /api/ping, /api/health. Public, no auth.
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from stepper.clients import settings_store
from stepper.core.rate_limiter import limiter, RATE_LIMITS
from stepper.models import HealthResponse
from stepper.services.degrees import ConfigurationError, parse_max_scale
from stepper.services.user_count import SUPPORTED_QUERIES
from stepper.utils.timezone import utc_now

router = APIRouter()

VERSION = "1.0.0"


@router.get("/ping")
async def ping() -> dict[str, Any]:
    """Liveness probe. Touches nothing on disk."""
    return {"status": "ok", "version": VERSION}


@router.get("/health")
@limiter.limit(RATE_LIMITS["health"])
async def health_check(request: Request) -> JSONResponse:
    """
    Checks that the stored settings load, a key is configured, `max` is a
    positive integer and `query` is supported.
    Returns HTTP 200 if healthy, 503 if degraded. Never echoes the key.
    """
    checks: dict[str, Any] = {}
    healthy = True

    try:
        stepper_settings = settings_store.read_settings()
        checks["settings_loaded"] = True
    except ConfigurationError as exc:
        checks["settings_loaded"] = False
        checks["settings_error"] = str(exc)
        stepper_settings = None
        healthy = False

    if stepper_settings is not None:
        checks["key_configured"] = bool(stepper_settings.key)
        checks["ip_filter"] = bool(stepper_settings.ip)
        try:
            checks["max_scale"] = parse_max_scale(stepper_settings.max)
        except ConfigurationError as exc:
            checks["max_scale"] = None
            checks["max_scale_error"] = str(exc)
        checks["query_supported"] = stepper_settings.query in SUPPORTED_QUERIES

        healthy = (
            checks["key_configured"]
            and checks["max_scale"] is not None
            and checks["query_supported"]
        )

    body = HealthResponse(
        status="healthy" if healthy else "degraded",
        checks=checks,
        timestamp=utc_now().isoformat(),
    )
    return JSONResponse(
        status_code=200 if healthy else 503,
        content=body.model_dump(),
    )
