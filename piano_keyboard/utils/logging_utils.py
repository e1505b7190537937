"""
Logging Utilities

Logging setup shared by the CLI, the sweep script and the tests.

Usage:
    from piano_keyboard.utils.logging_utils import setup_logging, get_logger

    setup_logging("DEBUG")       # level name from the config file, or an int
    logger = get_logger(__name__)
    logger.debug("tier fired")
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from tqdm import tqdm

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: Union[int, str]) -> int:
    """
    Turn a level name ("info", "DEBUG") or number into a logging level.

    Raises:
        ValueError: If the name is not a known logging level
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {level!r}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    use_tqdm: bool = False
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level or level name
        log_file: Optional file path for logging output
        format_string: Custom format string
        use_tqdm: Route console output through tqdm.write so progress bars stay intact
    """
    level = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    if use_tqdm:
        console_handler = TqdmLoggingHandler(level)
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class TqdmLoggingHandler(logging.Handler):
    """Writes records with tqdm.write so they do not break progress bars."""

    def emit(self, record):
        try:
            tqdm.write(self.format(record))
        except Exception:
            self.handleError(record)
