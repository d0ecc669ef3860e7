# algoflow/utils/logging_config.py
"""
Logging configuration utilities.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

from ..models.config import LoggingConfig


LOG_LEVEL_ENV = "ALGOFLOW_LOG_LEVEL"
LOG_FILE_ENV = "ALGOFLOW_LOG_FILE"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_str: Log format string
        log_file: Optional log file path
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_str or DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Per-request httpx logging is too chatty below WARNING.
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    return root_logger


def setup_logging_from_config(config: LoggingConfig) -> logging.Logger:
    return setup_logging(level=config.level, format_str=config.format, log_file=config.file)


def configure_from_environment(default_level: str = "INFO") -> logging.Logger:
    """Configure logging from ALGOFLOW_LOG_LEVEL and ALGOFLOW_LOG_FILE."""
    return setup_logging(
        level=os.getenv(LOG_LEVEL_ENV, default_level),
        log_file=os.getenv(LOG_FILE_ENV) or None,
    )

