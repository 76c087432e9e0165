"""Centralized logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

logger.configure(extra={"name": "projectile_lab"})


def setup_logging(level: str = "INFO", log_dir: Optional[str | Path] = None) -> None:
    """Install the console sink and, optionally, a rotating file sink.

    Args:
        level: Minimum level for the console sink
        log_dir: Directory for DEBUG-level log files; no file sink when None
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT, colorize=True)

    if log_dir is not None:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            logs_dir / "projectile_lab_{time}.log",
            rotation="10 MB",
            retention="10 days",
            level="DEBUG",
            format=FILE_FORMAT,
        )


def get_logger(name: Optional[str] = None):
    """Get a logger instance bound to the given module name.

    Args:
        name: Module name for the logger (usually __name__)

    Returns:
        Configured logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


__all__ = ["logger", "get_logger", "setup_logging"]
