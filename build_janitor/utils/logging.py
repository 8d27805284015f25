"""Logging utilities for cleanup cycles.

User-facing lines are written to stderr as ``<namespace>: <message>``.
Every line is also kept in memory, forwarded at debug level to the ``build_janitor.events``
logger and optionally appended to a JSON lines file.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from build_janitor.config.options import DEFAULT_NAMESPACE


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


LEVEL_PRIORITY = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
}

STYLES = {
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: None,
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}


@dataclass
class LogEntry:
    """A line emitted by ``JanitorLogger``."""

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    extra: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict:
        entry = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "message": self.message,
        }
        if self.extra:
            entry["extra"] = self.extra
        return entry


class JanitorLogger:
    """Logger for cleanup cycles.

    Thread-safe. Outputs to the console, the ``build_janitor.events`` stdlib logger,
    an in-memory list and optionally a JSON lines file.
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        console_output: bool = True,
        min_level: LogLevel = LogLevel.INFO,
        log_file: Optional[str | Path] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the logger.

        Args:
            namespace: Prefix for every line
            console_output: Whether to print to the console
            min_level: Minimum log level to record
            log_file: Optional JSON lines file to append to
            console: Rich console to print to (stderr by default)
        """
        self.namespace = namespace
        self.console_output = console_output
        self.min_level = min_level
        self.console = console or Console(stderr=True, highlight=False, emoji=False)
        self.records: list[LogEntry] = []
        self._stdlib = logging.getLogger("build_janitor.events")
        self._lock = threading.Lock()
        self._json_handle = None
        if log_file is not None:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._json_handle = open(log_file, "a", encoding="utf-8", buffering=1)

    def close(self) -> None:
        """Close the JSON lines file, if any."""
        with self._lock:
            if self._json_handle is not None:
                self._json_handle.close()
                self._json_handle = None

    def _should_log(self, level: LogLevel) -> bool:
        return LEVEL_PRIORITY[level] >= LEVEL_PRIORITY[self.min_level]

    def format(self, message: str) -> str:
        return f"{self.namespace}: {message}"

    def log(self, level: LogLevel, message: str, extra: Optional[dict] = None) -> None:
        """Log a message (thread-safe).

        Args:
            level: Log level
            message: Message without the namespace prefix
            extra: Additional structured data for the JSON lines file
        """
        if not self._should_log(level):
            return

        entry = LogEntry(level=level, message=message, extra=extra)
        line = self.format(message)

        with self._lock:
            self.records.append(entry)
            if self.console_output:
                self.console.print(
                    line, style=STYLES[level], markup=False, soft_wrap=True
                )
            if self._json_handle is not None:
                self._json_handle.write(json.dumps(entry.to_dict()) + "\n")

        self._stdlib.debug(line)

    def debug(self, message: str, **extra: Any) -> None:
        self.log(LogLevel.DEBUG, message, extra or None)

    def info(self, message: str, **extra: Any) -> None:
        self.log(LogLevel.INFO, message, extra or None)

    def warning(self, message: str, **extra: Any) -> None:
        self.log(LogLevel.WARNING, message, extra or None)

    def error(self, message: str, **extra: Any) -> None:
        self.log(LogLevel.ERROR, message, extra or None)

    def removed(self, path: str, dry_run: bool) -> None:
        """Log one removed (or would-be removed) path."""
        verb = "dry-run" if dry_run else "removed"
        self.warning(f"{verb} {path}", path=path, mode="dry-run" if dry_run else "real")

    def paused(self) -> None:
        """Log that cleanup is paused because the build reported errors."""
        self.warning("pausing due to build errors")

    def messages(self) -> list[str]:
        """Return every recorded line with its namespace prefix."""
        return [self.format(entry.message) for entry in self.records]
