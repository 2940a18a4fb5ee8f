"""
Tests for logging configuration.
"""

import logging
from pathlib import Path

import pytest

from devbox.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    LOG_LEVEL_ENV,
    resolve_level,
    setup_logging,
    setup_logging_from_env,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags_in_order(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_only(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_unknown_level_is_warning(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_handler_with_own_level(self, tmp_path: Path):
        log_file = tmp_path / "devbox.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG

        logging.getLogger("devbox.test").debug("to the file only")
        for handler in root.handlers:
            handler.flush()
        assert "to the file only" in log_file.read_text()

    def test_from_env(self, tmp_path: Path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
        monkeypatch.setenv(LOG_FILE_ENV, str(log_file))
        monkeypatch.setenv(LOG_FILE_LEVEL_ENV, "INFO")

        setup_logging_from_env()

        assert logging.getLogger().level == logging.INFO
        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
