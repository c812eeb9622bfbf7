"""Logging setup for ledgerkit.

Modules log through ``get_logger(name)``, which places them under the
``ledgerkit`` namespace. Nothing is emitted until ``configure_logging`` is
called (the CLI does this from ``--log-level`` / ``LEDGERKIT_LOG_LEVEL``).
"""

import logging
import sys
import threading
from typing import Any

__all__ = ["get_logger", "configure_logging", "reset_logging", "parse_level"]

_LOGGER_PREFIX = "ledgerkit"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None
_lock = threading.Lock()


class _StderrHandler(logging.StreamHandler):
    """Stream handler that always writes to the current sys.stderr."""

    def __init__(self):
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ledgerkit namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def parse_level(level: int | str) -> int:
    """Convert a level name such as "info" to its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def configure_logging(
    *,
    level: int | str = logging.WARNING,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure the ledgerkit logger hierarchy.

    The handler is installed once; later calls only change the level.
    """
    global _handler
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(parse_level(level))

    with _lock:
        if _handler is not None:
            return
        if handler is not None:
            _handler = handler
        elif stream is not None:
            _handler = logging.StreamHandler(stream)
        else:
            _handler = _StderrHandler()
        if _handler.formatter is None:
            _handler.setFormatter(logging.Formatter(_FORMAT))
        root_logger.addHandler(_handler)
        root_logger.propagate = False


def reset_logging() -> None:
    """Remove the installed handler. FOR TESTING ONLY."""
    global _handler
    with _lock:
        logger = logging.getLogger(_LOGGER_PREFIX)
        if _handler is not None:
            logger.removeHandler(_handler)
        _handler = None
        logger.setLevel(logging.WARNING)
        logger.propagate = True
