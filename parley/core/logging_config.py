"""
Logging Configuration Module.

Central logging setup for the Parley server. Every record carries the
correlation id of the HTTP request being served (``-`` outside a request),
so the lines written while handling one request can be grouped together.

Features:
- Per-module log levels
- Console handler, plus a file handler when ``ENABLE_FILE_LOGGING`` is set
- ``simple``, ``detailed`` and ``json`` line formats
- Correlation id propagated through a context variable
"""

import logging
import os
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _configured_level() -> str:
    # PARLEY_LOG_LEVEL is read directly when the server package is unavailable
    try:
        from parley.server.core.config import settings
    except ImportError:
        return os.getenv("PARLEY_LOG_LEVEL", "INFO").upper()
    return settings.log_level.upper()


LOG_LEVEL = _configured_level()
LOG_FORMAT = os.getenv("LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("LOG_FILE_DIR", "logs")
LOG_FILE_NAME = "parley.log"
ENABLE_FILE_LOGGING = _env_flag("ENABLE_FILE_LOGGING")

SIMPLE_FORMAT = "%(levelname)s [%(correlation_id)s] %(name)s: %(message)s"

DETAILED_FORMAT = (
    "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s "
    "(%(filename)s:%(lineno)d %(funcName)s): %(message)s"
)

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"correlation_id": "%(correlation_id)s", "line": "%(filename)s:%(lineno)d", '
    '"message": "%(message)s"}'
)

_FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

MODULE_LOG_LEVELS = {
    "parley.core": "INFO",
    "parley.core.database": "INFO",
    "parley.server": "INFO",
    "parley.server.api": "DEBUG",
    "parley.server.services": "DEBUG",
    "parley.server.hub": "DEBUG",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "multipart": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}

_correlation_id: ContextVar[str] = ContextVar("parley_correlation_id", default="-")


def get_correlation_id() -> str:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token:
    """Bind a correlation id to the current context.

    Returns:
        Token to pass to ``reset_correlation_id`` when the request is done
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the correlation id of the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get()
        return True


def _handler(handler: logging.Handler, level, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        log_level: Console level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format override (simple, detailed, json); unknown names fall back to detailed
        enable_file: Also write DEBUG and above to ``LOG_FILE_DIR/parley.log`` when
            ``ENABLE_FILE_LOGGING`` is set
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(_FORMATS.get(fmt, DETAILED_FORMAT), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers filter
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_handler(logging.StreamHandler(), level, formatter))

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_handler(logging.FileHandler(log_dir / LOG_FILE_NAME), logging.DEBUG, formatter))

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
