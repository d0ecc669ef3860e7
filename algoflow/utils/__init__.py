"""
Utility functions and helpers.
"""

from .config_loader import get_default_config, load_config
from .logging_config import configure_from_environment, setup_logging

__all__ = [
    "load_config",
    "get_default_config",
    "setup_logging",
    "configure_from_environment",
]
