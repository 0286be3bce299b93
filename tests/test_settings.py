"""Tests for configuration defaults and logging setup."""

import logging

import pytest

from main import create_app
from settings import EngineConfig, configure_logging


@pytest.fixture
def root_level():
    root = logging.getLogger()
    saved = root.level
    yield root
    root.setLevel(saved)


class TestLogging:
    def test_explicit_level(self, root_level):
        configure_logging("debug")
        assert root_level.level == logging.DEBUG

    def test_level_from_environment(self, root_level, monkeypatch):
        monkeypatch.setenv("SORTVIZ_LOG_LEVEL", "error")
        configure_logging()
        assert root_level.level == logging.ERROR

    def test_unknown_level_falls_back_to_warning(self, root_level, monkeypatch):
        monkeypatch.setenv("SORTVIZ_LOG_LEVEL", "chatty")
        configure_logging()
        assert root_level.level == logging.WARNING

    def test_handler_installed_once(self, root_level):
        configure_logging()
        count = len(root_level.handlers)
        configure_logging()
        assert len(root_level.handlers) == count


class TestConfig:
    def test_defaults_loaded_into_flask(self, app):
        assert app.config["MAX_ELEMENTS"] == EngineConfig.MAX_ELEMENTS
        assert app.config["AUTO_RESET_DELAY"] == 3.0

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SORTVIZ_DEFAULT_SPEED", "8")
        app = create_app({"TESTING": True})
        assert app.config["DEFAULT_SPEED"] == 8
        assert app.secret_key
