"""
Tests for logging configuration helpers.
"""

import logging

import pytest

from envmonitor.core.logger import resolve_level


class TestResolveLevel:
    """Tests for resolve_level."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            (" Warning ", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("critical", logging.CRITICAL),
        ],
    )
    def test_known_levels(self, name, expected):
        """Test that level names resolve case-insensitively."""
        assert resolve_level(name) == expected

    def test_unknown_level_falls_back(self):
        """Test that unknown or missing names use the default."""
        assert resolve_level("verbose") == logging.DEBUG
        assert resolve_level(None, default=logging.INFO) == logging.INFO
