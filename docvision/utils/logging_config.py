"""Centralized logging configuration for docvision."""

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..constants import LOG_DATE_FORMAT, LOG_FILE_PATH, LOG_FORMAT, LOG_ROTATION


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging for the entire application.

    Extractor modules log through the standard library; the dispatcher and CLI
    log through loguru. Both get a console sink and a DEBUG file sink.

    Args:
        verbose: If True, set DEBUG level for console output
        log_file: Optional custom log file path (defaults to LOG_FILE_PATH)
    """
    log_path = log_file or LOG_FILE_PATH

    log_dir = Path(log_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Standard library root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.handlers = []

    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        '%(levelname)s: %(message)s' if not verbose else LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT
    ))
    root_logger.addHandler(console_handler)

    # loguru sinks
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")
    logger.add(log_path, level="DEBUG", rotation=LOG_ROTATION)

    suppress_noisy_loggers()


def suppress_noisy_loggers() -> None:
    """Suppress verbose logging from third-party libraries."""
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('pypdfium2').setLevel(logging.WARNING)
    logging.getLogger('yaml').setLevel(logging.WARNING)

