"""
Logging setup and timing helpers.
"""

import os
import logging
import logging.handlers
import time
from functools import wraps

CONSOLE_FORMAT = "%(asctime)s  %(levelname)-5s  %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)-28s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _rotating_file_handler(log_file, max_size_mb, backup_count):
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=int(max_size_mb * 1024 * 1024),
        backupCount=backup_count,
    )
    # The file keeps per-frame debug lines even when the console is quieter
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Route all ``aslai`` loggers to the console and, optionally, a rotating file.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console)

    if log_file:
        root_logger.addHandler(_rotating_file_handler(log_file, max_size_mb, backup_count))

    return root_logger


def setup_logging_from_config(settings: dict):
    """Configure logging from the ``logging`` config section."""
    return setup_logging(
        level=settings.get("level", "INFO"),
        log_file=settings.get("file"),
        max_size_mb=settings.get("max_size_mb", 10),
        backup_count=settings.get("backup_count", 3),
    )


def log_timing(func):
    """Decorator to log function execution time."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("%s took %.2fms", func.__name__, elapsed)
        return result

    return wrapper
