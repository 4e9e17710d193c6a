#!/usr/bin/env python3
"""
Logging setup for the trade journal web app.
Writes app module logs to a file with timestamps in a configured timezone.
"""

import functools
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config.constants import DEFAULT_LOG_DATEFMT, DEFAULT_LOG_FORMAT, DEFAULT_LOG_TIMEZONE

# Application loggers that receive the file handler
APP_MODULES = [
    'config',
    'data',
    'financial',
    'web_dashboard',
    '__main__',
]

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ['httpx', 'httpcore', 'hpack']


class ZoneTimeFormatter(logging.Formatter):
    """Formatter that renders timestamps in a fixed timezone."""

    def __init__(self, fmt=None, datefmt=None, tz_name: str = DEFAULT_LOG_TIMEZONE):
        super().__init__(fmt, datefmt)
        try:
            self.tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            self.tz = timezone.utc

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        return dt.strftime(datefmt or DEFAULT_LOG_DATEFMT)


def setup_logging(level=logging.INFO, log_config: Optional[Dict[str, Any]] = None) -> logging.Handler:
    """Attach a file handler to the app's module loggers.

    Args:
        level: Log level (int or name); overridden by log_config['level']
        log_config: Optional logging section from Settings

    Returns:
        The file handler that was attached
    """
    log_config = log_config or {}
    level = log_config.get('level', level)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    log_file = log_config.get('file') or os.path.join('logs', 'app.log')
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(ZoneTimeFormatter(
        log_config.get('format', DEFAULT_LOG_FORMAT),
        datefmt=log_config.get('datefmt', DEFAULT_LOG_DATEFMT),
        tz_name=log_config.get('timezone', DEFAULT_LOG_TIMEZONE),
    ))
    file_handler.setLevel(level)

    for module_name in APP_MODULES:
        logger = logging.getLogger(module_name)

        # Remove existing file handlers to avoid duplicates on re-init
        for h in logger.handlers[:]:
            if isinstance(h, logging.FileHandler):
                logger.removeHandler(h)
                h.close()

        logger.addHandler(file_handler)
        logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return file_handler


def log_execution_time(module_name=None, slow_threshold: float = 1.0):
    """Decorator to log execution time of functions.

    Args:
        module_name: Optional logger name. If None, uses function's module.
        slow_threshold: Calls slower than this (seconds) log at INFO, others at DEBUG
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                duration = time.perf_counter() - start_time
                logger = logging.getLogger(module_name or func.__module__)
                level = logging.INFO if duration > slow_threshold else logging.DEBUG
                logger.log(level, f"PERF: {func.__name__} took {duration:.3f}s")
        return wrapper
    return decorator
