"""
Logging configuration module.

This module provides centralized logging setup for applications embedding
the formatters, configuring console output and optional file output.
"""

import logging
from display_formatters.config.settings import Settings


def setup_logger() -> None:
    """
    Configure and initialize the root logger.

    Sets up console logging and, when Settings.LOG_TO_FILE is enabled,
    file logging at Settings.LOG_LEVEL. Formatter fallbacks log at WARNING
    under the "display_formatters" logger, so they become visible once this runs.

    The function configures:
        - Console logging to stderr
        - File logging to Settings.LOG_FILE with UTF-8 encoding (optional)
        - Custom formatters with timestamp, logger name, level, and message

    Args:
        None

    Returns:
        None

    Raises:
        OSError: If logs directory cannot be created (rare, usually permissions issue)

    Example:
        >>> setup_logger()
        >>> format_currency(5, currency="??")
        2026-10-19 14:30:00 - display_formatters.utils.formatters - WARNING - Currency formatting error: ...

    Note:
        - Existing handlers are cleared before setup to avoid duplicates
        - Logs directory is created only when file logging is enabled
    """
    level = logging.getLevelName(Settings.LOG_LEVEL)
    if not isinstance(level, int):
        level = logging.INFO

    # Clear any existing handlers to prevent duplicates on re-initialization
    logging.root.handlers.clear()

    # Create formatter with timestamp, logger name, level, and message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Handler for console output
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if Settings.LOG_TO_FILE:
        Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)

        # Handler for file output (UTF-8 encoding for localized output)
        file_handler = logging.FileHandler(Settings.LOG_FILE, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)
