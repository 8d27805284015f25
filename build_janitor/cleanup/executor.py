"""Deletion primitive used by the orchestrator.

The executor receives paths that have already been resolved and vetted by
the boundary guard. It never raises for a path that does not exist (treated
as already clean), and a failure on one path does not abort the batch.
"""

import asyncio
import logging
import os
import shutil
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from build_janitor.cleanup.result import CleanupEntry, CleanupMode, CleanupResult

logger = logging.getLogger(__name__)


@runtime_checkable
class DeletionExecutor(Protocol):
    """Removes (or simulates removing) a batch of paths."""

    async def delete(
        self,
        paths: Sequence[str],
        base_dir: str,
        dry_run: bool,
    ) -> CleanupResult:
        """Remove ``paths`` (relative to ``base_dir``) and report what happened."""
        ...


class FilesystemDeletionExecutor:
    """Deletes files and directory trees on the local filesystem."""

    async def delete(
        self,
        paths: Sequence[str],
        base_dir: str,
        dry_run: bool,
    ) -> CleanupResult:
        """Run the batch in a worker thread.

        Args:
            paths: Relative paths to remove
            base_dir: Directory the paths are relative to
            dry_run: If True, only report what would be removed

        Returns:
            CleanupResult with one entry per removed path
        """
        return await asyncio.to_thread(self.delete_sync, paths, base_dir, dry_run)

    def delete_sync(
        self,
        paths: Sequence[str],
        base_dir: str,
        dry_run: bool,
    ) -> CleanupResult:
        result = CleanupResult()
        mode = CleanupMode.DRY_RUN if dry_run else CleanupMode.REAL
        removed_dirs: set[str] = set()

        # parents sort before their children
        for relative in sorted(set(paths)):
            full = os.path.normpath(os.path.join(base_dir, relative))

            if self._under_removed_dir(full, removed_dirs):
                result.entries.append(CleanupEntry(relative, not dry_run, mode))
                continue

            if not os.path.lexists(full):
                logger.debug(f"Already clean: {full}")
                continue

            if os.path.isdir(full) and not os.path.islink(full):
                if self._delete_directory(full, relative, dry_run, result):
                    removed_dirs.add(full)
            else:
                self._delete_file(full, relative, dry_run, result)

        return result

    @staticmethod
    def _under_removed_dir(path: str, removed_dirs: set[str]) -> bool:
        parent = os.path.dirname(path)
        while parent and parent != path:
            if parent in removed_dirs:
                return True
            path, parent = parent, os.path.dirname(parent)
        return False

    def _delete_file(
        self, path: str, relative: str, dry_run: bool, result: CleanupResult
    ) -> bool:
        """Delete a single file or symlink.

        Returns:
            True if the path was (or would be) removed
        """
        mode = CleanupMode.DRY_RUN if dry_run else CleanupMode.REAL
        try:
            size = os.lstat(path).st_size
            if not dry_run:
                os.unlink(path)
                logger.debug(f"Deleted file: {path}")
            result.entries.append(CleanupEntry(relative, not dry_run, mode))
            result.bytes_freed += size
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            result.errors.append(f"Failed to delete {relative}: {e}")
            logger.warning(f"Failed to delete file {path}: {e}")
            return False

    def _delete_directory(
        self, path: str, relative: str, dry_run: bool, result: CleanupResult
    ) -> bool:
        """Delete a directory and all contents.

        Returns:
            True if the directory was (or would be) removed
        """
        mode = CleanupMode.DRY_RUN if dry_run else CleanupMode.REAL
        try:
            size = 0
            for dirpath, _, filenames in os.walk(path):
                for name in filenames:
                    try:
                        size += os.lstat(os.path.join(dirpath, name)).st_size
                    except OSError:
                        continue
            if not dry_run:
                shutil.rmtree(path)
                logger.debug(f"Deleted directory: {path} ({size} bytes)")
            result.entries.append(CleanupEntry(relative, not dry_run, mode))
            result.bytes_freed += size
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            result.errors.append(f"Failed to delete {relative}: {e}")
            logger.warning(f"Failed to delete directory {path}: {e}")
            return False
