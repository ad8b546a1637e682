"""
Structured Logging Setup for true-iso

Provides centralized logging configuration and utilities.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional
import sys
import time


# Global logger registry
_loggers = {}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,  # 10 MB
    backup_count: int = 5,
    console_enabled: bool = True,
    file_enabled: bool = False
):
    """
    Setup logging configuration for the entire application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log message format
        date_format: Date format for timestamps
        log_file: Path to log file
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        console_enabled: Enable console logging (stderr, stdout may carry image data)
        file_enabled: Enable file logging

    Example:
        >>> setup_logging(
        ...     log_level="DEBUG",
        ...     log_file="/tmp/true_iso.log",
        ...     file_enabled=True
        ... )
    """
    if log_format is None:
        log_format = DEFAULT_FORMAT
    if date_format is None:
        date_format = DEFAULT_DATE_FORMAT

    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format, datefmt=date_format)

    if console_enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation
    if file_enabled and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)  # File gets all messages
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug(f"Logging initialized: level={log_level}, file={'enabled' if file_enabled and log_file else 'disabled'}")


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger for a specific module.

    Args:
        name: Logger name (usually __name__)
        level: Optional log level override

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Correction started")
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper()))

    _loggers[name] = logger
    return logger


def setup_from_config(config):
    """
    Setup logging from configuration object or dictionary.

    Args:
        config: ConfigLoader instance or full config dict (with 'logging' key)

    Example:
        >>> from true_iso.config import get_config
        >>> setup_from_config(get_config())
    """
    if hasattr(config, 'get_section'):
        logging_config = config.get_section('logging')
    elif isinstance(config, dict):
        logging_config = config.get('logging', {})
    else:
        raise TypeError(f"config must be ConfigLoader or dict, got {type(config)}")

    file_config = logging_config.get('file', {})
    console_config = logging_config.get('console', {})

    setup_logging(
        log_level=logging_config.get('level', 'INFO'),
        log_format=logging_config.get('format'),
        date_format=logging_config.get('date_format'),
        log_file=file_config.get('path'),
        max_bytes=file_config.get('max_bytes', 10485760),
        backup_count=file_config.get('backup_count', 5),
        console_enabled=console_config.get('enabled', True),
        file_enabled=file_config.get('enabled', False)
    )

    # Set module-specific levels
    module_loggers = logging_config.get('loggers', {})
    for module_name, module_level in module_loggers.items():
        logging.getLogger(module_name).setLevel(getattr(logging, module_level.upper()))


class LoggerAdapter(logging.LoggerAdapter):
    """
    Custom logger adapter with context.

    Adds contextual information to log messages.

    Example:
        >>> logger = get_logger(__name__)
        >>> adapted = LoggerAdapter(logger, {'sprite': 'tile_01.png'})
        >>> adapted.info("Detection started")
        # Output: ... - INFO - [sprite=tile_01.png] Detection started
    """

    def process(self, msg, kwargs):
        """Process log message with context."""
        if self.extra:
            context_str = ', '.join(f"{k}={v}" for k, v in self.extra.items())
            msg = f"[{context_str}] {msg}"
        return msg, kwargs


def log_execution_time(logger: logging.Logger):
    """
    Decorator to log execution time.

    Args:
        logger: Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> @log_execution_time(logger)
        ... def correct_sprite(image):
        ...     pass
    """
    def decorator(func):
        def wrapper(*args, **kwargs):
            func_name = func.__name__
            start_time = time.time()
            logger.debug(f"Starting {func_name}")

            try:
                result = func(*args, **kwargs)
                elapsed = time.time() - start_time
                logger.debug(f"{func_name} completed in {elapsed:.2f}s")
                return result
            except Exception as e:
                elapsed = time.time() - start_time
                logger.error(f"{func_name} failed after {elapsed:.2f}s: {e}")
                raise
        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper
    return decorator
