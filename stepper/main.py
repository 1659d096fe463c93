"""
stepper/main.py — FastAPI application entry point
Includes: lifespan management, CORS, rate limiting, security headers,
          startup validation.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from stepper.clients import settings_store
from stepper.config import get_settings
from stepper.core.logging import setup_logging
from stepper.core.rate_limiter import limiter
from stepper.routers import admin, api
from stepper.routers import stepper as stepper_router
from stepper.services.degrees import ConfigurationError, parse_max_scale

settings = get_settings()


# ──────────────────────────────────────────────────────────────────────────────
# Application Lifespan
# ──────────────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    FastAPI lifespan: startup → yield → shutdown.
    Startup: initialize logging, warn about placeholder credentials and an
    unusable stored settings document.
    """
    setup_logging(settings.log_level)
    logger.info("Stepper starting up...")

    _validate_env()
    _validate_stored_settings()

    logger.info("Startup complete.")
    yield
    logger.info("Shutting down Stepper.")


def _validate_env() -> None:
    """Warn loudly about missing or placeholder admin credentials."""
    missing = []
    for attr, env_name in (("admin_user", "ADMIN_USER"), ("admin_pass", "ADMIN_PASS")):
        val = getattr(settings, attr, None)
        if not val or val == "change-me-immediately":
            missing.append(env_name)

    if missing:
        logger.critical(f"Missing or placeholder env vars: {', '.join(missing)}")
        logger.warning("Admin endpoints are exposed with default credentials until these are set.")


def _validate_stored_settings() -> None:
    """The app still starts; /stepper answers 500 until the document is fixed."""
    try:
        stored = settings_store.read_settings()
        parse_max_scale(stored.max)
    except ConfigurationError as exc:
        logger.error(f"Stored stepper settings are unusable: {exc}")
        return

    if not stored.key:
        logger.warning("No stepper key configured. Any caller without ?key= is authorized.")


# ──────────────────────────────────────────────────────────────────────────────
# FastAPI App
# ──────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Stepper",
    description=(
        "Recently active user count as a 0-359 degree position "
        "for a stepper motor indicator."
    ),
    version=api.VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ── Rate limiting — slowapi ───────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    lambda req, exc: JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded. Slow down."},
    ),
)
app.add_middleware(SlowAPIMiddleware)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# ── Security headers middleware ───────────────────────────────────────────────
@app.middleware("http")
async def add_security_headers(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.is_production:
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
    return response


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(stepper_router.router, tags=["stepper"])
app.include_router(api.router, prefix="/api", tags=["health"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/api/health", status_code=302)


def run() -> None:
    """Console entry point: serve with uvicorn."""
    import uvicorn

    uvicorn.run("stepper.main:app", host="0.0.0.0", port=settings.port)
