"""Centralized logging configuration for prefixbus."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from prefixbus.config.schema import BusConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    verbose: bool = False,
    config: Optional[BusConfig] = None,
) -> None:
    """
    Configure global logging sinks.

    Args:
        level: Minimum level for console output; overrides config.log_level
        log_file: Optional path for a persistent log file
        verbose: If True, set console level to DEBUG
        config: Bus configuration supplying the default console level
    """
    # Remove default loguru sink
    logger.remove()

    if level is None:
        level = (config or BusConfig()).log_level
    console_level = "DEBUG" if verbose else level.upper()

    logger.add(
        sys.stderr,
        level=console_level,
        format=CONSOLE_FORMAT,
        backtrace=True,
        diagnose=True,
    )

    # The file keeps everything, including the structured extras bound
    # by LoggingMessageBus.
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="1 week",
            compression="zip",
            enqueue=True,  # Safe for multi-threaded/async
        )

    logger.debug(f"Logging initialized. Console level: {console_level}, File: {log_file}")
