"""Logging initialization utilities using loguru."""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <8}</level> {message}"


def init_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Send log records to stderr, and to a rotating file when log_file is given."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format=CONSOLE_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            rotation="10 MB",
            retention="10 days",
            backtrace=False,
            diagnose=False,
            level="INFO",
        )
