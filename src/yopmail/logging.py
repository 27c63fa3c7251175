"""
Logging configuration using loguru.

Records from the ``yopmail`` package are disabled on import, so an
application embedding the client sees nothing until it opts in, either
through ``setup_logging`` or with ``logger.enable("yopmail")`` on its own
loguru sinks.
"""

from __future__ import annotations
import sys
from pathlib import Path
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

logger.disable("yopmail")


def setup_logging(
    log_level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    console_level: str | None = None,
) -> None:
    """
    Replace loguru's sinks with a console sink and an optional rotating file,
    then enable the package's records.

    Args:
        log_level: Level for the file sink (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file; console only when None
        rotation: Size or age at which the file is rotated ("10 MB", "1 day")
        retention: How long rotated files are kept ("7 days")
        console_level: Console level; defaults to WARNING when a file is set,
            otherwise to ``log_level``
    """
    logger.remove()

    if console_level is None:
        console_level = "WARNING" if log_file else log_level

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_path,
                format=FILE_FORMAT,
                level=log_level,
                rotation=rotation,
                retention=retention,
                compression="zip",
                encoding="utf-8",
                catch=True,
            )
        except OSError as e:
            logger.enable("yopmail")
            logger.warning(f"File logging to {log_path} unavailable, console only: {e}")
            return

    logger.enable("yopmail")
    if log_file:
        logger.debug(f"Logging to file: {log_path}")


__all__ = ["logger", "setup_logging"]
