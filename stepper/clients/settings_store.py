"""
stepper/clients/settings_store.py — Stored stepper settings document
One JSON object on local disk (STEPPER_SETTINGS_FILE). Read fresh on every
request; nothing is memoized in-process.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger
from pydantic import ValidationError

from stepper.config import get_settings
from stepper.core import logging as app_logging
from stepper.models import StepperSettings
from stepper.services.degrees import ConfigurationError

settings = get_settings()

PathLike = Union[str, Path]


def _settings_path(path: Optional[PathLike]) -> Path:
    return Path(path) if path is not None else Path(settings.stepper_settings_file)


def _decode_object(raw: str) -> Optional[dict[str, Any]]:
    """Decode JSON text; None unless it is a JSON object."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.debug(f"Settings JSON parse failed: {exc}")
        return None
    if not isinstance(data, dict):
        return None
    return data


def _describe(exc: ValidationError) -> str:
    """
    Field names and reasons only. Stored values are left out since `key`
    is a secret; `from None` keeps the pydantic error out of tracebacks.
    """
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'document'}: {err['msg']}"
        for err in exc.errors()
    )
    return f"Invalid stepper settings: {problems}"


def parse_settings(raw: Optional[str]) -> StepperSettings:
    """
    Build StepperSettings from stored JSON text.
    Unparseable or non-object documents fall back to {} and then defaults.
    A well-formed document with wrongly typed fields is a ConfigurationError.
    """
    data: dict[str, Any] = {}
    if raw and raw.strip():
        decoded = _decode_object(raw)
        if decoded is None:
            logger.warning("Stored stepper settings are not a JSON object. Using defaults.")
        else:
            data = decoded

    try:
        return StepperSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(_describe(exc)) from None


def read_settings(path: Optional[PathLike] = None) -> StepperSettings:
    """Read the settings document from disk. A missing file means {}."""
    target = _settings_path(path)
    if not target.exists():
        return StepperSettings()
    try:
        raw = target.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning("Stored stepper settings are not valid UTF-8. Using defaults.")
        return StepperSettings()
    return parse_settings(raw)


def save_settings(
    raw: Optional[str],
    path: Optional[PathLike] = None,
) -> Optional[StepperSettings]:
    """
    Save raw JSON text submitted by an administrator.
    Empty input is ignored and returns None. Anything that does not decode
    to a JSON object is stored as {}.
    """
    if not raw or not raw.strip():
        return None

    data = _decode_object(raw)
    reset = data is None
    if reset:
        data = {}

    # Validate before writing so a bad document never reaches disk
    try:
        stored = StepperSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(_describe(exc)) from None

    target = _settings_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    tmp_path.write_text(json.dumps(data), encoding="utf-8")
    tmp_path.replace(target)

    app_logging.log_settings_saved(str(target), list(data.keys()), reset)
    return stored
