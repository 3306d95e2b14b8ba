"""test_logging.py - configure_logging 테스트"""

import logging

import pytest

from src.core.logging import LOG_FORMAT, LOGGER_NAMESPACE, configure_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    """테스트 간 핸들러 격리."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers.clear()
    yield
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


class TestConfigureLogging:
    def test_adds_single_handler(self):
        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt == LOG_FORMAT

    def test_level_by_name(self):
        logger = configure_logging("debug")

        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG

    def test_unknown_level_name_falls_back_to_info(self):
        logger = configure_logging("chatty")

        assert logger.level == logging.INFO

    def test_child_loggers_inherit(self):
        configure_logging(logging.WARNING)

        assert logging.getLogger("src.app.services.explain").getEffectiveLevel() == logging.WARNING
