"""
Logging configuration for the date picker application.

Usage:
    from logging_config import setup_logging, get_logger

    # In main.py:
    setup_logging()  # Sets up logging for the whole application

    # In any module:
    logger = get_logger(__name__)
    logger.debug("Popup opened")     # Only shows in debug mode
    logger.info("Form submitted")    # Normal operation
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_DIR = os.path.join(os.path.dirname(__file__), "logs")


def setup_logging(level=logging.INFO, console_output=True, file_output=True, debug_mode=False):
    """
    Configure logging for the entire application.

    Args:
        level: Minimum logging level (logging.DEBUG, INFO, WARNING, ERROR)
        console_output: Whether to show logs in the terminal
        file_output: Whether to save logs to files under ``LOG_DIR``
        debug_mode: If True, enables verbose debug logging
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if debug_mode:
        level = logging.DEBUG

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )

    handlers = []

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        handlers.append(console_handler)

    if file_output:
        os.makedirs(LOG_DIR, exist_ok=True)

        file_handler = RotatingFileHandler(
            os.path.join(LOG_DIR, 'datepicker.log'),
            maxBytes=5*1024*1024,
            backupCount=3
        )
        file_handler.setLevel(logging.DEBUG)  # file gets everything
        file_handler.setFormatter(detailed_formatter)
        handlers.append(file_handler)

        error_handler = RotatingFileHandler(
            os.path.join(LOG_DIR, 'errors.log'),
            maxBytes=1024*1024,
            backupCount=3
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        handlers.append(error_handler)

    # basicConfig is a no-op once handlers exist, so set them directly
    root_logger.setLevel(logging.DEBUG if file_output else level)
    for handler in handlers:
        root_logger.addHandler(handler)

    setup_logger = get_logger('logging_setup')
    setup_logger.info("Logging system initialized")
    setup_logger.debug(f"Console output: {console_output}, file output: {file_output}")
    setup_logger.info(f"Log level: {logging.getLevelName(level)}")


def get_logger(name):
    """
    Get a logger for a specific module.

    Args:
        name: Usually __name__ from the calling module
    """
    return logging.getLogger(name)


def level_from_name(name):
    """Return the numeric logging level for *name* (e.g. ``"debug"``).

    Raises ``ValueError`` for anything that is not a standard level name.
    """
    level = logging.getLevelName(str(name).strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level
