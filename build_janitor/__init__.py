"""Build-output janitor.

Removes stale build artifacts between builds while refusing to touch
anything outside the configured boundary.
"""

from build_janitor.cleanup import (
    CleanupOrchestrator,
    CleanupResult,
    CleanupState,
    FilesystemDeletionExecutor,
    sweep_paths,
)
from build_janitor.config import CleanupOptions, load_cleanup_options
from build_janitor.errors import (
    ConfigurationError,
    JanitorError,
    LedgerError,
    PatternSyntaxError,
    SafetyViolationError,
)
from build_janitor.hosts import StaticBuildReport
from build_janitor.ledger import AssetLedger
from build_janitor.patterns import PatternResolver
from build_janitor.utils.boundaries import is_safe_to_delete

__version__ = "0.1.0"

__all__ = [
    "AssetLedger",
    "CleanupOptions",
    "CleanupOrchestrator",
    "CleanupResult",
    "CleanupState",
    "ConfigurationError",
    "FilesystemDeletionExecutor",
    "JanitorError",
    "LedgerError",
    "PatternResolver",
    "PatternSyntaxError",
    "SafetyViolationError",
    "StaticBuildReport",
    "is_safe_to_delete",
    "load_cleanup_options",
    "sweep_paths",
]
