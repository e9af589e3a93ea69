"""
Logging setup for pokerdot, built on loguru.

Modules obtain a logger with ``get_logger(__name__)``; the process entry point
calls ``setup_logging`` once to choose the level and optional file sink.
"""

import sys
from typing import Optional

from loguru import logger as _logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_logger.configure(extra={"name": "pokerdot"})


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level for the stderr sink (DEBUG, INFO, WARNING, ...).
        log_file: Optional path of a rotating log file receiving the same records.
    """
    _logger.remove()
    _logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file:
        _logger.add(
            log_file,
            level=level.upper(),
            format=LOG_FORMAT,
            rotation="5 MB",
            retention=3,
            encoding="utf-8",
        )


def get_logger(name: str):
    """Return a loguru logger bound to a module name."""
    return _logger.bind(name=name)
