"""
stepper/core/access_gate.py — Authorization for the stepper endpoint
Shared-secret key plus an optional single-IP allow check.
Rejections are silent: nothing is raised and nothing is logged.
"""
from __future__ import annotations

import ipaddress
import secrets
from typing import Optional

from stepper.models import StepperSettings


# ──────────────────────────────────────────────────────────────────────────────
# Client IP resolution
# ──────────────────────────────────────────────────────────────────────────────

def is_valid_ip(value: Optional[str]) -> bool:
    """
    True if value is a plain IPv4 or IPv6 address as `ipaddress` parses it.
    Scoped IPv6 addresses ("fe80::1%eth0") are rejected; a zone id never
    appears in a forwarded-for header or an allow-list entry.
    """
    if not value or "%" in value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def resolve_client_ip(
    forwarded_for: Optional[str],
    remote_addr: Optional[str],
) -> Optional[str]:
    """
    Resolve the caller's IP: X-Forwarded-For first, then the peer address.
    The forwarded header must hold a single valid address; a proxy chain
    ("a, b") is not valid and falls through to the peer address.
    Returns None when neither value is a valid IP.
    """
    for candidate in (forwarded_for, remote_addr):
        if candidate is None:
            continue
        candidate = candidate.strip()
        if is_valid_ip(candidate):
            return candidate
    return None


# ──────────────────────────────────────────────────────────────────────────────
# Checks
# ──────────────────────────────────────────────────────────────────────────────

def check_ip(settings: StepperSettings, client_ip: Optional[str]) -> bool:
    """No configured ip means any caller passes, unparseable addresses included."""
    if not settings.ip:
        return True
    if not is_valid_ip(client_ip):
        return False
    return client_ip == settings.ip


def check_key(settings: StepperSettings, provided_key: Optional[str]) -> bool:
    """
    Exact match of the provided key against the stored key.
    If either side is absent they match only when both are absent, so an
    unconfigured key does not lock the endpoint but an empty ?key= does not
    satisfy it either. Deployments should always configure a key.
    """
    if settings.key is None or provided_key is None:
        return settings.key is None and provided_key is None
    return secrets.compare_digest(
        provided_key.encode("utf-8"),
        settings.key.encode("utf-8"),
    )


def authorize(
    settings: StepperSettings,
    provided_key: Optional[str],
    client_ip: Optional[str],
) -> bool:
    """True only if both the IP check and the key check pass."""
    ip_ok = check_ip(settings, client_ip)
    key_ok = check_key(settings, provided_key)
    return ip_ok and key_ok
