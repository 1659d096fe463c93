"""
tests/test_access_gate.py — Unit tests for shared-secret and IP authorization
"""
from __future__ import annotations

import pytest

from stepper.core.access_gate import authorize, is_valid_ip, resolve_client_ip
from stepper.models import StepperSettings


@pytest.mark.parametrize("client_ip", ["1.2.3.4", "::1", "not-an-ip", None])
def test_matching_key_without_ip_filter(keyed_settings, client_ip):
    assert authorize(keyed_settings, "abc", client_ip) is True


@pytest.mark.parametrize("client_ip", ["1.2.3.4", None])
def test_wrong_key_without_ip_filter(keyed_settings, client_ip):
    assert authorize(keyed_settings, "xyz", client_ip) is False


def test_missing_key_rejected_when_key_configured(keyed_settings):
    assert authorize(keyed_settings, None, "1.2.3.4") is False
    assert authorize(keyed_settings, "", "1.2.3.4") is False


def test_key_comparison_is_exact(keyed_settings):
    assert authorize(keyed_settings, "ABC", None) is False
    assert authorize(keyed_settings, "abc ", None) is False


def test_ip_filter_rejects_other_address():
    settings = StepperSettings(key="abc", ip="1.2.3.4")
    assert authorize(settings, "abc", "9.9.9.9") is False


def test_ip_filter_accepts_configured_address():
    settings = StepperSettings(key="abc", ip="1.2.3.4")
    assert authorize(settings, "abc", "1.2.3.4") is True


def test_ip_filter_rejects_unresolved_address():
    settings = StepperSettings(key="abc", ip="1.2.3.4")
    assert authorize(settings, "abc", None) is False
    assert authorize(settings, "abc", "garbage") is False


def test_ip_filter_still_needs_key():
    settings = StepperSettings(key="abc", ip="1.2.3.4")
    assert authorize(settings, "xyz", "1.2.3.4") is False


def test_empty_ip_setting_disables_filter():
    settings = StepperSettings(key="abc", ip="")
    assert authorize(settings, "abc", "garbage") is True


def test_unset_key_matches_only_absent_key():
    settings = StepperSettings(key=None)
    assert authorize(settings, None, None) is True
    assert authorize(settings, "", None) is False
    assert authorize(settings, "anything", None) is False


def test_non_ascii_keys_compare_safely():
    settings = StepperSettings(key="schlüssel")
    assert authorize(settings, "schlüssel", None) is True
    assert authorize(settings, "schlussel", None) is False


@pytest.mark.parametrize("value, expected", [
    ("127.0.0.1", True),
    ("2001:db8::1", True),
    ("256.1.1.1", False),
    ("1.2.3.4, 5.6.7.8", False),
    ("fe80::1%eth0", False),
    ("", False),
    (None, False),
])
def test_is_valid_ip(value, expected):
    assert is_valid_ip(value) is expected


def test_forwarded_for_wins_over_peer():
    assert resolve_client_ip("10.0.0.7", "192.168.1.1") == "10.0.0.7"


def test_invalid_forwarded_for_falls_back_to_peer():
    assert resolve_client_ip("unknown", "192.168.1.1") == "192.168.1.1"
    assert resolve_client_ip("10.0.0.7, 10.0.0.8", "192.168.1.1") == "192.168.1.1"


def test_forwarded_for_is_stripped():
    assert resolve_client_ip(" 10.0.0.7 ", None) == "10.0.0.7"


def test_unresolvable_client_ip():
    assert resolve_client_ip(None, None) is None
    assert resolve_client_ip("nope", "testclient") is None
