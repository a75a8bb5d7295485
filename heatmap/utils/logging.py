"""
Logging setup for the heatmap pipeline.

A colored loguru console sink always; a rotated, compressed file sink when
HEATMAP_LOG_FILE is configured.
"""

import os
import sys
from pathlib import Path

from loguru import logger

from heatmap.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str | None = None, log_file: Path | None = None) -> list[int]:
    """
    Configure the pipeline loggers.

    Args:
        level: Log level, defaults to HEATMAP_LOG_LEVEL
        log_file: File sink path, defaults to HEATMAP_LOG_FILE

    Returns:
        Ids of the installed loguru handlers
    """
    config = settings.pipeline
    level = (level or config.log_level).upper()
    log_file = log_file or config.log_file

    logger.remove()
    handlers = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)]

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logger.add(
                log_file,
                level=level,
                format=FILE_FORMAT,
                rotation=config.log_rotation,
                retention=config.log_retention,
                compression="gz",
            )
        )

    logger.debug(f"Logging configured: level={level}, file={log_file or '-'}")
    return handlers


if os.environ.get("DISABLE_LOGGING") != "1":
    setup_logging()
