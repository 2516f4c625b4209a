"""Process-wide logging setup.

Two sinks coexist: the Rich console logger used by the workflow builder
tool, and stdlib ``logging`` used by the repositories and the HTTP API.
``setup_logging`` configures both from one :class:`Settings`.
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import TYPE_CHECKING, Any

from rich.console import Console

from flowbuilder.logging.logger import FlowBuilderLogger, LogLevel

if TYPE_CHECKING:
    from flowbuilder.core.config import Settings


_logger: FlowBuilderLogger | None = None


def get_logger() -> FlowBuilderLogger:
    """Return the process-wide console logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = FlowBuilderLogger()
    return _logger


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    *,
    console: Console | None = None,
    **options: Any,
) -> FlowBuilderLogger:
    """Replace the console logger.

    ``options`` are passed through to :class:`FlowBuilderLogger`
    (``enabled``, ``show_timestamps``, ``show_level``).

    Example:
        >>> configure_logging("debug", show_timestamps=False)
        >>> get_logger().action_start("list")
    """
    global _logger
    if not isinstance(level, LogLevel):
        level = LogLevel(level.lower())
    _logger = FlowBuilderLogger(level=level, console=console, **options)
    return _logger


def disable_logging() -> None:
    get_logger().enabled = False


def enable_logging() -> None:
    get_logger().enabled = True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with extra context fields merged in."""

    _RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in self._RESERVED:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _dict_config(level: str, fmt: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s %(levelname)-7s %(name)s | %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "json": {"()": JsonFormatter, "datefmt": "%Y-%m-%dT%H:%M:%S"},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "json" if fmt == "json" else "text",
            },
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": {
            "flowbuilder": {"level": level},
            "uvicorn": {"level": level},
            # Per-statement and per-request noise.
            "sqlalchemy.engine": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
        },
    }


def setup_logging(settings: Settings) -> None:
    """Apply ``settings.log_level`` and ``settings.log_format`` to both sinks."""
    level = settings.log_level.upper()
    logging.config.dictConfig(_dict_config(level, settings.log_format))
    configure_logging(level)
