"""Minimal logging utilities for Huellas.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from huellas.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Subtokenize pass %d", 1)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the ``huellas`` namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("compiler").name
        'huellas.compiler'
        >>> get_logger("huellas.parser").name
        'huellas.parser'
    """
    if not (name == "huellas" or name.startswith("huellas.")):
        name = f"huellas.{name}"
    return logging.getLogger(name)
