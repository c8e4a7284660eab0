"""
Central logging configuration for vcal_lite.

Keeps vcal_lite's own diagnostics while quieting third-party libraries that
log more than an import tool needs.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Third-party loggers and the level they are held at outside debug mode
_THIRD_PARTY_LEVELS: dict[str, int] = {
    "icalendar": logging.WARNING,
    "pydantic": logging.WARNING,
    "yaml": logging.WARNING,
}

_VCAL_MODULES = [
    "vcal_lite",
    "vcal_lite.parser.vcal_parser",
    "vcal_lite.parser.vcal_datetime",
    "vcal_lite.core.timezone_utils",
    "vcal_lite.config_loader",
]


def configure_vcal_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for vcal_lite.

    Args:
        debug_mode: Whether to enable debug logging for vcal_lite modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        VCAL_LITE_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        VCAL_LITE_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("VCAL_LITE_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("VCAL_LITE_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in _VALID_LEVELS:
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Leave handlers installed by a host application alone
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    logger_config = dict(_THIRD_PARTY_LEVELS)
    vcal_level = logging.DEBUG if final_debug else logging.INFO
    for module in _VCAL_MODULES:
        logger_config[module] = vcal_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.debug("Debug logging enabled for vcal_lite modules")


def apply_root_level(level_name: str) -> bool:
    """
    Set the root log level from a configured level name.

    Returns:
        True if the level was applied, False if the name is not recognized
    """
    level_name = level_name.upper()
    if level_name not in _VALID_LEVELS:
        logging.getLogger(__name__).warning("Ignoring unknown log level %r", level_name)
        return False
    logging.getLogger().setLevel(getattr(logging, level_name))
    return True


def reset_logging_to_debug() -> None:
    """
    Reset all loggers to DEBUG level for troubleshooting.
    """
    logging.getLogger().setLevel(logging.DEBUG)
    for logger_name in [*_THIRD_PARTY_LEVELS, *_VCAL_MODULES]:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ["vcal_lite", *_THIRD_PARTY_LEVELS]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
