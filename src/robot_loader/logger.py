"""Console logging for the robot loader.

Modules log through ``logging.getLogger(__name__)``; this module only
installs a colored stream handler on the package logger for host
applications that do not configure logging themselves.
"""

import logging
from typing import ClassVar, Dict, Optional

PACKAGE_LOGGER = "robot_loader"


class LevelFormatter(logging.Formatter):
    """Formatter with color highlighting per log level."""

    HEADER = "[ROBOT_LOADER]"
    HEADERCOL = "\x1b[38;5;13m"

    WHITE = "\x1b[37m"
    BLUE = "\x1b[34;20m"
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    LINE_FORMAT = "[%(asctime)s][%(name)s][%(levelname)s]: %(message)s"

    FORMATS: ClassVar[Dict[int, str]] = {
        logging.DEBUG: HEADERCOL + HEADER + RESET + BLUE + LINE_FORMAT + RESET,
        logging.INFO: HEADERCOL + HEADER + RESET + WHITE + LINE_FORMAT + RESET,
        logging.WARNING: HEADERCOL + HEADER + RESET + YELLOW + LINE_FORMAT + RESET,
        logging.ERROR: HEADERCOL + HEADER + RESET + RED + LINE_FORMAT + RESET,
        logging.CRITICAL: HEADERCOL + HEADER + RESET + BOLD_RED + LINE_FORMAT + RESET,
    }

    def __init__(self, use_color: bool = True):
        super().__init__(self.LINE_FORMAT)
        self._formatters = {
            level: logging.Formatter(fmt if use_color else self.HEADER + self.LINE_FORMAT)
            for level, fmt in self.FORMATS.items()
        }

    def format(self, record):
        formatter = self._formatters.get(record.levelno)
        if formatter is None:
            return super().format(record)
        return formatter.format(record)


_HANDLER: Optional[logging.Handler] = None


def setup_logging(level: int = logging.INFO, use_color: bool = True) -> logging.Logger:
    """Attach the level formatter to the package logger and set its level.

    Calling this again replaces the previously installed handler.
    """
    global _HANDLER
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)

    _HANDLER = logging.StreamHandler()
    _HANDLER.setFormatter(LevelFormatter(use_color=use_color))
    logger.addHandler(_HANDLER)
    logger.setLevel(level)
    return logger
