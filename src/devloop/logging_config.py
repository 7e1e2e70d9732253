"""
Centralized logging configuration for devloop.

This module provides a single setup_logging function that configures
logging consistently with:
- Console output on stdout, one line per message, prefixed with ``[devloop]``
- Optional technical file output (``DEVLOOP_LOG_FILE``)
- Fresh log file on each start unless ``DEVLOOP_LOG_APPEND=1``
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from devloop.config import ConfigurationError, env_bool, env_str

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_UNKNOWN_LOGGER_NAME = "<unknown>"

CONSOLE_PREFIX = "[devloop]"
_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_TECHNICAL_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _close_handlers(logger: logging.Logger, logger_name: Optional[str] = None) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as e:
            safe_name = logger_name if logger_name else _UNKNOWN_LOGGER_NAME
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", safe_name, e)


def _reset_root_handlers(root_logger: logging.Logger) -> None:
    _close_handlers(root_logger)
    root_logger.handlers = []


def _resolve_level(level: Optional[str]) -> int:
    name = (level or env_str("DEVLOOP_LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ConfigurationError.invalid_value("DEVLOOP_LOG_LEVEL", name, "Use DEBUG, INFO, WARNING or ERROR")
    return resolved


def _build_console_handler(verbose: bool) -> logging.Handler:
    if verbose:
        formatter = logging.Formatter(f"{CONSOLE_PREFIX} %(levelname)s %(name)s: %(message)s")
    else:
        formatter = logging.Formatter(f"{CONSOLE_PREFIX} %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    return console_handler


def _configure_file_handler() -> Optional[logging.Handler]:
    log_file = env_str("DEVLOOP_LOG_FILE")
    if not log_file:
        return None

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_mode = "a" if env_bool("DEVLOOP_LOG_APPEND", or_value=False) else "w"

    handler_cls = getattr(logging.handlers, "WatchedFileHandler", logging.FileHandler)
    file_handler = handler_cls(log_path, mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _TECHNICAL_DATEFMT))
    file_handler.setLevel(logging.DEBUG)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def setup_logging(level: Optional[str] = None, *, verbose: bool = False) -> None:
    """Configure logging for the development loop.

    Args:
        level: Level name override; falls back to ``DEVLOOP_LOG_LEVEL`` then INFO.
        verbose: Include level and logger name in console lines.
    """

    with _config_lock:
        root_logger = logging.getLogger()
        _reset_root_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(verbose))

        file_handler = _configure_file_handler()
        if file_handler:
            root_logger.addHandler(file_handler)

        root_logger.setLevel(_resolve_level(level))
        _suppress_noisy_third_parties()
