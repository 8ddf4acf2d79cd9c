"""
Central logging configuration for calstream.

Keeps third-party parser logs quiet while leaving calstream's own warnings
(time zone fallbacks, epoch substitutions, exhausted rules) visible.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

ROOT_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

CALSTREAM_MODULES = [
    "calstream",
    "calstream.calendar_store",
    "calstream.date_value",
    "calstream.event_filter",
    "calstream.recurrence",
    "calstream.ordered_merge",
    "calstream.property_reader",
    "calstream.timezone_utils",
]


def configure_logging(
    debug_mode: bool = False, force_debug: Optional[bool] = None, level: Optional[str] = None
) -> None:
    """
    Configure logging levels for calstream.

    Args:
        debug_mode: Whether to enable debug logging for calstream modules
        force_debug: Override debug mode setting (None to use env var detection)
        level: Root log level name, e.g. Config.log_level (invalid names are ignored)

    Environment Variables:
        CALSTREAM_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        CALSTREAM_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("CALSTREAM_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("CALSTREAM_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    for name in ((level or "").upper(), env_log_level):
        if name in ROOT_LEVELS:
            root_level = getattr(logging, name)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if the application has not configured one
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    logger_config: dict[str, int] = {
        "icalendar": logging.INFO,
    }
    calstream_level = logging.DEBUG if final_debug else logging.INFO
    for module in CALSTREAM_MODULES:
        logger_config[module] = calstream_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for calstream modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ["calstream", "icalendar"]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
