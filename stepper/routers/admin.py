"""
stepper/routers/admin.py — Settings administration
GET/POST /admin/settings, HTTP Basic Auth.
The POST body is the raw JSON settings document.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from loguru import logger

from stepper.clients import settings_store
from stepper.core.auth import verify_basic_auth
from stepper.core.rate_limiter import limiter, RATE_LIMITS
from stepper.services.degrees import ConfigurationError

router = APIRouter()


@router.get("/settings")
@limiter.limit(RATE_LIMITS["admin"])
async def show_settings(
    request: Request,
    _auth: bool = Depends(verify_basic_auth),
) -> dict[str, Any]:
    """Stored settings with defaults applied."""
    try:
        return settings_store.read_settings().model_dump()
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.post("/settings")
@limiter.limit(RATE_LIMITS["admin"])
async def save_settings(
    request: Request,
    _auth: bool = Depends(verify_basic_auth),
) -> Any:
    """
    Replace the stored settings document.
    Empty body: nothing is saved (204). Non-object JSON is saved as {}.
    """
    raw = (await request.body()).decode("utf-8", errors="replace")

    try:
        stored = settings_store.save_settings(raw)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    if stored is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    logger.info("Stepper settings updated.")
    return stored.model_dump()
