"""Logging module for FlowBuilder.

Provides Rich console logging for tool actions and stdlib logging
configuration for the HTTP service.
"""

from flowbuilder.logging.logger import LogLevel, FlowBuilderLogger
from flowbuilder.logging.config import (
    configure_logging,
    disable_logging,
    enable_logging,
    get_logger,
    setup_logging,
)

__all__ = [
    "LogLevel",
    "FlowBuilderLogger",
    "configure_logging",
    "disable_logging",
    "enable_logging",
    "get_logger",
    "setup_logging",
]
