"""Rich console logger for workflow tool activity."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from rich.console import Console
from rich.markup import escape


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)


_ORDER = (LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARNING, LogLevel.ERROR)

_STYLES = {
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: "blue",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red bold",
}


class FlowBuilderLogger:
    """Console logger used by the workflow builder tool.

    Messages and context values are escaped before printing, so workflow
    names or node configs containing square brackets are shown verbatim.

    Example:
        >>> logger = FlowBuilderLogger(level=LogLevel.DEBUG)
        >>> logger.info("Loading structure", workflow_id="...")
        >>> logger.action_start("validate_workflow", "550e8400-...")
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        console: Console | None = None,
        show_timestamps: bool = True,
        show_level: bool = True,
        enabled: bool = True,
    ) -> None:
        self.level = level
        self.enabled = enabled
        self.show_timestamps = show_timestamps
        self.show_level = show_level
        self._console = console or Console(stderr=True)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return self.enabled and level.rank >= self.level.rank

    def _emit(self, level: LogLevel, body: str) -> None:
        if not self.is_enabled_for(level):
            return

        parts = []
        if self.show_timestamps:
            parts.append(f"[dim]{datetime.now():%H:%M:%S}[/]")
        if self.show_level:
            parts.append(f"[{_STYLES[level]}]{level.value.upper():7}[/]")
        parts.append(body)
        self._console.print(" ".join(parts))

    def log(self, level: LogLevel, message: str, **context: Any) -> None:
        body = escape(message)
        if context:
            body += " " + " ".join(f"[dim]{k}=[/]{escape(str(v))}" for k, v in context.items())
        self._emit(level, body)

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log(LogLevel.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log(LogLevel.ERROR, message, **context)

    # Workflow builder actions

    def action_start(self, action: str, workflow_id: str | None = None) -> None:
        target = f" [dim]{escape(workflow_id)}[/]" if workflow_id else ""
        self._emit(LogLevel.DEBUG, f"[bold blue]▶ {escape(action)}[/]{target}")

    def action_end(self, action: str, duration_ms: int) -> None:
        self._emit(LogLevel.INFO, f"[bold green]✓ {escape(action)}[/] completed ({duration_ms}ms)")

    def action_error(self, action: str, error: str) -> None:
        """Failed actions are reported at warning level; the tool still answers."""
        self._emit(LogLevel.WARNING, f"[bold red]✗ {escape(action)}[/] failed: {escape(error)}")

    def validation_summary(
        self,
        workflow_name: str,
        errors: int,
        warnings: int,
        issues: int = 0,
    ) -> None:
        status = "[green]valid[/]" if errors == 0 and issues == 0 else "[red]invalid[/]"
        self._emit(
            LogLevel.INFO,
            f"[bold cyan]◆ {escape(workflow_name)}[/] {status} "
            f"({errors} errors | {warnings} warnings | {issues} data flow issues)",
        )
