"""Unit tests for logging configuration."""

from __future__ import annotations

import logging

import pytest

from debmanifest.log import _resolve_level, get_logger

pytestmark = pytest.mark.unit


class TestResolveLevel:
    """Tests for _resolve_level function."""

    def test_explicit_name(self) -> None:
        """Test that level names are case-insensitive."""
        assert _resolve_level("debug") == logging.DEBUG

    def test_explicit_int(self) -> None:
        """Test that numeric levels pass through."""
        assert _resolve_level(logging.ERROR) == logging.ERROR

    def test_environment_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the environment variable is consulted."""
        monkeypatch.setenv("DEBMANIFEST_LOG_LEVEL", "warning")
        assert _resolve_level(None) == logging.WARNING

    def test_default_is_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default level, ignoring unknown names."""
        monkeypatch.delenv("DEBMANIFEST_LOG_LEVEL", raising=False)
        assert _resolve_level("nonsense") == logging.INFO


def test_get_logger_default_name() -> None:
    """Test the package logger name."""
    assert get_logger().name == "debmanifest"
