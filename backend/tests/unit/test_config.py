"""Unit tests for config.py"""

import pytest

from src.mdnotes.config import GuestAccess, Settings, get_settings


def test_defaults():
    s = Settings()
    assert s.app_name == "mdnotes API"
    assert s.guest_access is GuestAccess.WRITE
    assert s.max_document_length == 100_000
    assert "history" in s.forbidden_aliases


def test_env_override(monkeypatch):
    monkeypatch.setenv("GUEST_ACCESS", "deny")
    monkeypatch.setenv("MAX_DOCUMENT_LENGTH", "42")
    s = Settings()
    assert s.guest_access is GuestAccess.DENY
    assert s.max_document_length == 42


def test_get_settings_returns_shared_instance():
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "level, other, allowed",
    [
        (GuestAccess.DENY, GuestAccess.READ, False),
        (GuestAccess.READ, GuestAccess.READ, True),
        (GuestAccess.READ, GuestAccess.WRITE, False),
        (GuestAccess.WRITE, GuestAccess.READ, True),
        (GuestAccess.WRITE, GuestAccess.CREATE, False),
        (GuestAccess.CREATE, GuestAccess.CREATE, True),
    ],
)
def test_guest_access_ordering(level, other, allowed):
    assert level.allows(other) is allowed
