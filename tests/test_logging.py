"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from commitcraft.utils import LogCapture, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_default_level(self):
        """Test normal runs only show warnings."""
        logger = setup_logging()
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0], RichHandler)

    def test_verbose(self):
        """Test --verbose turns on debug output."""
        logger = setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_log_file(self, tmp_path):
        """Test a file handler is added on request."""
        log_file = tmp_path / "logs" / "commitcraft.log"
        logger = setup_logging(log_file=log_file)

        assert log_file.parent.exists()
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)

        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_handlers_not_duplicated(self):
        """Test repeated setup replaces handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1


class TestLogCapture:
    """Tests for LogCapture helper."""

    def test_captures_child_loggers(self):
        """Test module loggers propagate into the capture."""
        with LogCapture() as capture:
            get_logger("git.status").debug("hello from status")

        assert capture.has_message("hello from status")

    def test_restores_level(self):
        """Test the logger level is restored on exit."""
        logger = setup_logging()
        with LogCapture():
            assert logger.level == logging.DEBUG
        assert logger.level == logging.WARNING
