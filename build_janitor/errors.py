"""Exception types raised by the janitor.

Configuration problems are raised when the janitor is constructed (or when a
pattern is first compiled). Safety violations are raised during a cleanup
cycle and are never retried automatically.
"""

from pathlib import Path
from typing import Optional


class JanitorError(Exception):
    """Base class for all janitor errors."""


class ConfigurationError(JanitorError):
    """Raised for invalid options, legacy option names or unusable hosts."""


class PatternSyntaxError(ConfigurationError):
    """Raised when a glob pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")


class SafetyViolationError(JanitorError):
    """Raised when a deletion target lies outside the boundary without override."""

    def __init__(
        self,
        path: str | Path,
        boundary: str | Path,
        namespace: str = "build-janitor",
        message: Optional[str] = None,
    ):
        self.path = Path(path)
        self.boundary = Path(boundary)
        if message is None:
            message = (
                f"{namespace}: Cannot delete files/folders outside the boundary "
                f"'{self.boundary}' ('{self.path}'). Can be overridden with the "
                f"`allow_outside_boundary` option."
            )
        super().__init__(message)


class LedgerError(JanitorError):
    """Raised when a persisted asset ledger cannot be read."""
