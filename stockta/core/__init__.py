"""Core configuration and logging."""

from stockta.core.config import Settings, get_settings
from stockta.core.logging import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
]
