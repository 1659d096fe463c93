"""
stepper/services/degrees.py — Raw count to indicator angle mapping
The stepper dial covers 0–359 degrees; `max` is the raw count shown at full scale.
"""
from __future__ import annotations

import math
from typing import Any

FULL_SCALE_DEGREES = 359


class ConfigurationError(ValueError):
    """Stored stepper settings cannot be used to produce a reading."""


def parse_max_scale(value: Any) -> int:
    """
    Parse the stored `max` setting as a strict positive integer.
    Accepts ints and strings of decimal digits. Booleans, floats, zero,
    negatives and anything else raise ConfigurationError.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"max must be a positive integer, got {value!r}")

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdecimal():
        parsed = int(value.strip())
    else:
        raise ConfigurationError(f"max must be a positive integer, got {value!r}")

    if parsed <= 0:
        raise ConfigurationError(f"max must be greater than zero, got {parsed}")
    return parsed


def to_degrees(raw_count: int, max_scale: int) -> int:
    """
    Convert a raw count to an angle in [0, 359].

    degrees = round(min(359, floor(raw_count * (359 / max_scale))))

    The floor happens before the clamp and the rounding after it; keep that
    order so readings match existing devices.

    max_scale is coerced to int; pass the result of parse_max_scale.
    Precondition: max_scale > 0 after coercion. A non-positive scale raises
    ConfigurationError before any division takes place.
    """
    max_scale = int(max_scale)
    if max_scale <= 0:
        raise ConfigurationError(f"max must be greater than zero, got {max_scale}")
    if raw_count < 0:
        raise ValueError(f"raw_count must be non-negative, got {raw_count}")

    step = FULL_SCALE_DEGREES / max_scale
    scaled = math.floor(raw_count * step)
    if scaled > FULL_SCALE_DEGREES:
        scaled = FULL_SCALE_DEGREES
    return int(round(scaled))
