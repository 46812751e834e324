"""
Logging configuration for the cell-site geotagger.

Both batch entry points configure the root logger from the ``logging`` section
of their environment: human-readable lines in development, one JSON object per
line in production, and an optional rotating log file.
"""

import functools
import json
import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional


LOG_FORMATS = ("standard", "json")
STANDARD_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Geospatial and spreadsheet libraries log per feature or per cell at DEBUG
_QUIET_LOGGERS = ("shapely", "pyogrio", "fiona", "openpyxl")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        log_entry.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(log_entry, default=str)


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JSONFormatter(datefmt='%Y-%m-%d %H:%M:%S')
    return logging.Formatter(STANDARD_FORMAT)


def setup_logging(environment: str = "development",
                  log_level: str = "INFO",
                  log_dir: Optional[str] = None,
                  log_format: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        environment: Environment name, used for the log file name and the default format
        log_level: Logging level name (DEBUG/INFO/WARNING/ERROR)
        log_dir: Directory for ``geotag_<environment>.log`` (optional)
        log_format: "standard" or "json"; defaults to json in production

    Raises:
        ValueError: If the level or format is unknown
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    if log_format is None:
        log_format = "json" if environment == "production" else "standard"
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{log_format}', expected one of {LOG_FORMATS}")

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_build_formatter(log_format))
    root.addHandler(console_handler)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=Path(log_dir) / f"geotag_{environment}.log",
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(_build_formatter(log_format))
        root.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(logging_config: Dict[str, Any], environment: str) -> None:
    """Apply the ``logging`` section of an environment configuration."""
    setup_logging(
        environment=environment,
        log_level=logging_config.get("level", "INFO"),
        log_dir=logging_config.get("log_dir"),
        log_format=logging_config.get("format"),
    )


def log_performance(func):
    """
    Log the wall time of a call, and its failure if it raises.

    Args:
        func: Function to wrap

    Returns:
        Wrapped function
    """
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        logger.info(f"Starting {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Failed {func.__name__} after {time.perf_counter() - start_time:.3f}s: {e}")
            raise
        logger.info(f"Completed {func.__name__} in {time.perf_counter() - start_time:.3f}s")
        return result

    return wrapper
