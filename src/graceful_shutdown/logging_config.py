"""
Logging configuration for the command line tool.

Internal diagnostics go through the stdlib ``logging`` tree and are written to
stderr. The level defaults to WARNING so regular runs only show the console
status lines; ``GRACEFUL_SHUTDOWN_LOG_LEVEL=DEBUG`` exposes scan and poll
details.
"""

import logging
import sys
from typing import Union

from graceful_shutdown.config import ConfigurationError, env_str

_MODULE_LOGGER = logging.getLogger(__name__)
LOG_LEVEL_ENV = "GRACEFUL_SHUTDOWN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = env_str(LOG_LEVEL_ENV)
    if level is None:
        return DEFAULT_LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ConfigurationError.invalid_value(LOG_LEVEL_ENV, level, "Expected DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return resolved


def _close_handlers(logger: logging.Logger) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as e:
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", logger.name, e)


def _reset_all_handlers(root_logger: logging.Logger) -> None:
    _close_handlers(root_logger)
    root_logger.handlers = []


def _build_console_handler(level: int) -> logging.Handler:
    formatter = logging.Formatter(
        "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s",
        "%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    return console_handler


def setup_logging(level: Union[int, str, None] = None) -> None:
    """Configure the root logger; *level* overrides ``GRACEFUL_SHUTDOWN_LOG_LEVEL``."""
    resolved = _resolve_level(level)
    root_logger = logging.getLogger()
    _reset_all_handlers(root_logger)
    root_logger.addHandler(_build_console_handler(resolved))
    root_logger.setLevel(resolved)


__all__ = ["DEFAULT_LOG_LEVEL", "LOG_LEVEL_ENV", "setup_logging"]
