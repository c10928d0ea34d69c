"""Logging utilities for cellroute."""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional

from ..configuration.settings import LoggingSettings


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def _file_handler(settings: LoggingSettings) -> Optional[logging.Handler]:
    """Rotating file handler for ``settings.log_file``, or None if it cannot be opened."""
    try:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        return logging.handlers.RotatingFileHandler(
            filename=settings.log_file,
            maxBytes=settings.max_file_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding='utf-8'
        )
    except OSError as e:
        logging.getLogger(__name__).error(f"Cannot open log file {settings.log_file}: {e}")
        return None


def setup_logging(settings: LoggingSettings) -> None:
    """Configure the root logger from LoggingSettings.

    Replaces any handlers already installed on the root logger, so calling it
    again (e.g. after ``--verbose``) takes effect immediately.
    """
    level = _level(settings.level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: List[logging.Handler] = []
    if settings.console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if settings.file_output:
        file_handler = _file_handler(settings)
        if file_handler is not None:
            handlers.append(file_handler)

    formatter = logging.Formatter(fmt=settings.format_string, datefmt=settings.date_format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for component, component_level in settings.component_levels.items():
        logging.getLogger(component).setLevel(_level(component_level))

    root_logger.debug(f"Logging configured at {settings.level.upper()} with {len(handlers)} handler(s)")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes every message with ``[key=value ...]``."""

    def process(self, msg, kwargs):
        if not self.extra:
            return msg, kwargs
        context = " ".join(f"{key}={value}" for key, value in self.extra.items())
        return f"[{context}] {msg}", kwargs


def get_context_logger(name: str, **context) -> ContextLogger:
    """Logger for ``name`` carrying context such as ``net=clk``."""
    return ContextLogger(get_logger(name), context)
