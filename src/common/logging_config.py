"""
Logging configuration for winget-updater.

Colored console output on stderr. The per-run transcript is attached separately by ``winget_updater.transcript``.
"""

from __future__ import annotations

import logging
import sys
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[32m",     # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
        logging.CRITICAL: "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        levelname = record.levelname

        record.levelname = f"{color}{levelname}{self.RESET}"
        result = super().format(record)
        # Other handlers (the transcript) must see the plain level name
        record.levelname = levelname

        return result


def setup_logging(level: int = logging.INFO):
    """
    Configure the root logger.

    Args:
        level: Console logging level (default: INFO)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    if sys.stderr.isatty():
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root_logger.addHandler(console_handler)

