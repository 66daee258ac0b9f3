"""
Package-wide logger for vlurp.
"""

import logging
import sys


LOGGER_NAME = 'vlurp'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _build_logger() -> logging.Logger:
    _logger = logging.getLogger(LOGGER_NAME)

    # Importing the module twice must not stack handlers
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)

    _logger.setLevel(logging.INFO)
    _logger.propagate = False
    return _logger


logger = _build_logger()


__all__ = [
    "logger",
]
