"""
Logging Configuration
Sets up the global logger for the application.

The level can be overridden without touching code through the
SPATIALDOCS_LOG_LEVEL environment variable (e.g. "DEBUG" to trace every
rejected gesture and state transition).
"""
import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "SPATIALDOCS_LOG_LEVEL"


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve the log level from the environment, falling back to `default`."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" strings for unknown names
    return level if isinstance(level, int) else default


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger for the 'spatialdocs' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG). None reads SPATIALDOCS_LOG_LEVEL.
        log_file: Optional path to save logs to a file.
    """
    if level is None:
        level = level_from_env()

    logger = logging.getLogger("spatialdocs")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs during reload/restart
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized (level=%s).", logging.getLevelName(level))
