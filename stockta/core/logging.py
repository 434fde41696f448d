"""Logging configuration for the indicator engine."""

import logging
import sys
from typing import Optional, Union

from stockta.core.config import get_settings


def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    Configure logging for host applications embedding the engine.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses the configured ``log_level`` setting.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = level.upper()

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
