"""Minimal logging utilities for marmota.

Wraps the standard library logging module so every logger lives under the
"marmota." namespace. The library never installs handlers; applications
decide where records go.

Example:
    >>> from marmota.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsed %d blocks", 3)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "marmota." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("blocks").name
        'marmota.blocks'
        >>> get_logger("marmota.parser").name
        'marmota.parser'
    """
    if not (name == "marmota" or name.startswith("marmota.")):
        name = f"marmota.{name}"
    return logging.getLogger(name)
