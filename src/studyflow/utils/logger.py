"""
Logging setup for StudyFlow.

Every module logs through ``logging.getLogger(__name__)``; the entry points
call ``setup_logger`` once to attach handlers to the ``studyflow`` logger.
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "studyflow"


class SensitiveDataFilter(logging.Filter):
    """Masks password values that end up in log messages."""

    PATTERN = re.compile(r'(password|pass|pwd)["\']?\s*[:=]\s*["\']?([^"\'\s]+)', re.IGNORECASE)

    def filter(self, record: logging.LogRecord) -> bool:
        # format first so values passed as arguments are masked too
        record.msg = self.PATTERN.sub(r"\1: ********", record.getMessage())
        record.args = ()
        return True


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    name: str = LOGGER_NAME,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        log_file: Optional path for a rotating log file

    Returns:
        The configured logger. Calling this again returns it unchanged.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(_resolve_level(level))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=2 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(file_handler)

    return logger
