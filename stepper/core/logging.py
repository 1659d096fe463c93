"""
stepper/core/logging.py — loguru structured JSON logging setup
Unauthorized requests are deliberately absent from the log events below.
"""
from __future__ import annotations

import json
import sys
import traceback
from typing import Any, Optional

from loguru import logger

from stepper.utils.timezone import utc_now


def setup_logging(log_level: str = "INFO") -> None:
    """Configure loguru for structured JSON output to stdout."""
    # Remove default loguru handler
    logger.remove()

    logger.add(
        sys.stdout,
        level=log_level.upper(),
        format="{message}",
        serialize=True,       # loguru built-in JSON serialization
        backtrace=True,
        diagnose=False,
        colorize=False,
    )


def _build_log_record(
    component: str,
    operation: str,
    extra: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Build a base structured log record."""
    record: dict[str, Any] = {
        "timestamp": utc_now().isoformat(),
        "component": component,
        "operation": operation,
    }
    if extra:
        record.update(extra)
    return record


# ──────────────────────────────────────────────────────────────────────────────
# Log event helpers
# ──────────────────────────────────────────────────────────────────────────────

def log_metric_served(
    query: str,
    raw_count: int,
    max_scale: int,
    degrees: int,
) -> None:
    """Every successful stepper reading."""
    record = _build_log_record("stepper", "metric_served", {
        "query": query,
        "raw_count": raw_count,
        "max_scale": max_scale,
        "degrees": degrees,
    })
    logger.info(json.dumps(record))


def log_settings_saved(
    path: str,
    keys: list[str],
    reset: bool,
) -> None:
    """Every settings write. Values are never logged since `key` is a secret."""
    record = _build_log_record("settings_store", "save_settings", {
        "path": path,
        "keys": sorted(keys),
        "reset_to_empty": reset,
    })
    logger.info(json.dumps(record))


def log_error(
    component: str,
    operation: str,
    error: Exception,
    context: Optional[dict[str, Any]] = None,
) -> None:
    """Every error logged with full context."""
    tb = traceback.format_exc()
    record = _build_log_record(component, operation, {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "stack_trace": tb[:2000] if tb else "",
        "context": context or {},
    })
    logger.error(json.dumps(record))
