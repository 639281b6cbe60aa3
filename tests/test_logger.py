"""Tests for console logging setup."""

import logging

from robot_loader.logger import PACKAGE_LOGGER, LevelFormatter, setup_logging


def _record(level, message):
    return logging.LogRecord("robot_loader.loader", level, __file__, 1, message, None, None)


def test_formatter_plain():
    formatter = LevelFormatter(use_color=False)
    line = formatter.format(_record(logging.WARNING, "mesh missing"))

    assert line.startswith("[ROBOT_LOADER]")
    assert "[robot_loader.loader][WARNING]: mesh missing" in line
    assert "\x1b[" not in line


def test_formatter_colors_by_level():
    formatter = LevelFormatter()
    error_line = formatter.format(_record(logging.ERROR, "boom"))
    info_line = formatter.format(_record(logging.INFO, "ok"))

    assert LevelFormatter.RED in error_line
    assert LevelFormatter.WHITE in info_line
    assert error_line.endswith(LevelFormatter.RESET)


def test_setup_logging_replaces_handler():
    """Calling setup twice leaves a single handler installed."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(logger.handlers)
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.WARNING, use_color=False)

        added = [h for h in logger.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0].formatter, LevelFormatter)
        assert logger.level == logging.WARNING
    finally:
        for handler in logger.handlers:
            if handler not in before:
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
