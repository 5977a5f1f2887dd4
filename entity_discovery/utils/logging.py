"""
Logging configuration for the entity discovery pipeline.

Uses loguru. Console output goes to stderr since stdout carries the NDJSON
records; a run can additionally be logged to a rotating file (LOG_FILE or
--log-file).
"""

import os
import sys
from pathlib import Path

from loguru import logger

from entity_discovery.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str | None = None, log_file: Path | str | None = None) -> None:
    """
    Route loguru output to stderr and, optionally, a log file.

    Args:
        level: Log level; defaults to LOG_LEVEL
        log_file: File to log to as well; defaults to LOG_FILE. Rotation and
            retention follow LOG_ROTATION / LOG_RETENTION.
    """
    level = level or settings.pipeline.log_level
    log_file = log_file or settings.pipeline.log_file

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation=settings.pipeline.log_rotation,
            retention=settings.pipeline.log_retention,
            compression="gz",
        )

    logger.debug(f"Logging configured: level={level} file={log_file or '-'}")


if os.environ.get("DISABLE_LOGGING") != "1":
    setup_logging()
