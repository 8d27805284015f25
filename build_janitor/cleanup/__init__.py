"""Cleanup cycle: orchestration, deletion and the one-shot sweep."""

from build_janitor.cleanup.executor import DeletionExecutor, FilesystemDeletionExecutor
from build_janitor.cleanup.orchestrator import CleanupOrchestrator, CleanupState
from build_janitor.cleanup.result import CleanupEntry, CleanupMode, CleanupResult
from build_janitor.cleanup.sweep import SweepEntry, sweep_paths

__all__ = [
    "CleanupEntry",
    "CleanupMode",
    "CleanupOrchestrator",
    "CleanupResult",
    "CleanupState",
    "DeletionExecutor",
    "FilesystemDeletionExecutor",
    "SweepEntry",
    "sweep_paths",
]
