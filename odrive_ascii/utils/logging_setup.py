"""
Root logger configuration for the command line tool.

Console output goes to stderr so values printed by commands stay alone on
stdout. TX/RX lines from the client are DEBUG records; pass a level
override (the CLI's --verbose) to see them without editing config.json.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from odrive_ascii.config.models import LoggingConfig


LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def setup_logging(config: LoggingConfig, level_override: Optional[str] = None) -> None:
    """
    Install console and optional rotating file handlers on the root logger.

    Args:
        config: Logging section of config.json.
        level_override: Level used instead of config.level, e.g. "DEBUG".
    """
    level = (level_override or config.level).upper()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handlers = [logging.StreamHandler(sys.stderr)]
    if config.file:
        try:
            handlers.append(RotatingFileHandler(
                config.file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            ))
        except OSError as e:
            # Console still works, report through it
            root.addHandler(_configured(handlers[0], level, formatter))
            root.error(f"Cannot open log file {config.file}: {e}")
            return

    for handler in handlers:
        root.addHandler(_configured(handler, level, formatter))

    if config.file:
        root.info(f"Logging to {config.file}")


def _configured(handler: logging.Handler, level: str, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler
