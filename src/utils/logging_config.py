"""
Centralized Logging Configuration
Console output for progress, rotating file for full build diagnostics
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: Optional[str] = ".deckbuild/logs",
    log_file: str = "deckbuild.log",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure application-wide logging.

    The console handler stays at WARNING by default because progress is printed
    directly; pass console_level=logging.DEBUG for verbose runs.

    Args:
        log_dir: Directory for the diagnostic log file (None disables file logging)
        log_file: Name of the diagnostic log file
        console_level: Logging level for console output
        file_level: Logging level for file output
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Root logger instance
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)  # Handlers filter

    # Avoid duplicate handlers when called more than once
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug(f"Diagnostic log file: {log_path / log_file}")

    logger.debug(
        f"Logging initialized (console={logging.getLevelName(console_level)}, "
        f"file={logging.getLevelName(file_level) if log_dir is not None else 'off'})"
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
