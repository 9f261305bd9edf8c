"""Logging setup for cita-env.

User-facing lines go through rich consoles; this module covers the
diagnostic side under the `citaenv` logger namespace.

Debug output is enabled by `cita-env --debug` or CITA_ENV_DEBUG=1.
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER_NAME = "citaenv"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_log_level() -> int:
    """Determine log level from environment."""
    if os.environ.get("CITA_ENV_DEBUG", "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _formatter(debug: bool) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if debug else LOG_FORMAT, datefmt=DATE_FORMAT)


def _init_logging() -> None:
    """Attach the stderr handler to the root citaenv logger once."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if root_logger.handlers:
        return

    level = _get_log_level()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(level == logging.DEBUG))
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, placed under the citaenv namespace.

    Example:
        logger = get_logger(__name__)
        logger.debug("Docker command: %s", cmd)
    """
    _init_logging()
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_debug(enabled: bool = True) -> None:
    """Switch the citaenv loggers between DEBUG and WARNING."""
    level = logging.DEBUG if enabled else logging.WARNING
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter(enabled))
