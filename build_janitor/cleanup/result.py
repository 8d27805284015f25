"""Results of cleanup batches."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CleanupMode(str, Enum):
    """Whether a batch really deleted or only simulated."""

    REAL = "real"
    DRY_RUN = "dry-run"


@dataclass(frozen=True)
class CleanupEntry:
    """One path handled by a deletion batch."""

    path: str
    was_deleted: bool
    mode: CleanupMode

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "was_deleted": self.was_deleted, "mode": self.mode.value}


@dataclass
class CleanupResult:
    """Result of a cleanup batch.

    Only used for logging and reporting; never persisted.
    """

    entries: list[CleanupEntry] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    bytes_freed: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def removed(self) -> list[str]:
        """Paths that were (or under dry-run would have been) removed."""
        return [entry.path for entry in self.entries]

    @property
    def total_deleted(self) -> int:
        return len(self.entries)

    @property
    def success(self) -> bool:
        """Whether the batch completed without per-path errors."""
        return len(self.errors) == 0

    def merge(self, other: "CleanupResult") -> "CleanupResult":
        """Append another batch's outcome to this one."""
        self.entries.extend(other.entries)
        self.skipped.extend(other.skipped)
        self.errors.extend(other.errors)
        self.bytes_freed += other.bytes_freed
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "skipped": self.skipped,
            "errors": self.errors,
            "bytes_freed": self.bytes_freed,
            "total_deleted": self.total_deleted,
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
        }
