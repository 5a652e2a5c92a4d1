"""
Tests for configure_logging.
"""

import logging

import pytest

from airquality.logging_setup import LOG_FILE_NAME, configure_logging


@pytest.fixture
def package_logger():
    """Yields the package logger and restores it afterwards."""
    logger = logging.getLogger("airquality")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    saved_flag = getattr(logger, "_airquality_configured", False)
    logger.handlers = []
    logger._airquality_configured = False
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)
    logger._airquality_configured = saved_flag


class TestConfigureLogging:

    def test_creates_log_file(self, package_logger, tmp_path):
        log_dir = tmp_path / "nested" / "logs"
        log_file = configure_logging(log_dir)

        assert log_file == log_dir / LOG_FILE_NAME
        assert log_dir.is_dir()
        assert len(package_logger.handlers) == 2

    def test_messages_reach_file(self, package_logger, tmp_path):
        log_file = configure_logging(tmp_path)
        logging.getLogger("airquality.air_quality_service").info("Kathmandu refreshed")
        for handler in package_logger.handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip()
        assert "| INFO | airquality.air_quality_service | Kathmandu refreshed" in line

    def test_idempotent(self, package_logger, tmp_path):
        configure_logging(tmp_path)
        configure_logging(tmp_path)
        assert len(package_logger.handlers) == 2

    def test_level(self, package_logger, tmp_path):
        configure_logging(tmp_path, level=logging.WARNING)
        assert package_logger.level == logging.WARNING
