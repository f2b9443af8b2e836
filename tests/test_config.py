"""Tests for perch.config — AppConfig frozen dataclass."""

import dataclasses

import pytest

from perch.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.workers == 1
        assert config.max_content_length == 16 * 1024 * 1024
        assert config.traceback_style == "compact"

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 9000  # type: ignore[misc]

    def test_replace(self) -> None:
        config = dataclasses.replace(AppConfig(), port=3000, debug=True)
        assert config.port == 3000
        assert config.debug is True
