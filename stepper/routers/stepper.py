"""
stepper/routers/stepper.py — Indicator endpoint
GET /stepper?key=... → {"count":N} with N in 0–359, or an empty body when
the caller is not authorized.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from stepper.clients import settings_store
from stepper.core import logging as app_logging
from stepper.core.access_gate import authorize, resolve_client_ip
from stepper.core.rate_limiter import limiter, RATE_LIMITS
from stepper.models import CountResponse
from stepper.services.degrees import ConfigurationError, parse_max_scale, to_degrees
from stepper.services.user_count import get_user_count

router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    remote_addr = request.client.host if request.client else None
    return resolve_client_ip(request.headers.get("X-Forwarded-For"), remote_addr)


@router.get("/stepper")
@limiter.limit(RATE_LIMITS["stepper"])
async def stepper_reading(
    request: Request,
    key: Optional[str] = Query(None),
) -> Response:
    """
    Current active-user count as an indicator angle.
    Unauthorized callers get 200 with no body, the same as a device that
    simply has nothing to show.
    """
    try:
        stepper_settings = settings_store.read_settings()
    except ConfigurationError as exc:
        # A document that cannot be validated authorizes nobody
        app_logging.log_error("stepper", "read_settings", exc)
        return Response(status_code=status.HTTP_200_OK)

    try:
        if not authorize(stepper_settings, key, _client_ip(request)):
            return Response(status_code=status.HTTP_200_OK)

        max_scale = parse_max_scale(stepper_settings.max)
        raw_count = get_user_count(stepper_settings)
        degrees = to_degrees(raw_count, max_scale)

    except ConfigurationError as exc:
        app_logging.log_error("stepper", "stepper_reading", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Stepper is misconfigured: {exc}",
        )

    app_logging.log_metric_served(stepper_settings.query, raw_count, max_scale, degrees)
    return Response(
        content=CountResponse(count=degrees).render(),
        media_type="application/json",
    )
