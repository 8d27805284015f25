"""One-shot removal of explicit paths under a project root.

This is the janitor's oldest interface: no build lifecycle and no patterns,
just a list of paths relative to ``root``. Directories listed in ``exclude``
(by child name) survive, and only their siblings are removed.
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from build_janitor.cleanup.executor import FilesystemDeletionExecutor
from build_janitor.utils.boundaries import UnsafeReason, is_safe_to_delete
from build_janitor.utils.logging import JanitorLogger
from build_janitor.utils.paths import PathNormalizer, default_normalizer

log = logging.getLogger(__name__)

SWEEP_MESSAGES = {
    UnsafeReason.OUTSIDE_BOUNDARY: "must be inside the project root",
    UnsafeReason.IS_BOUNDARY: "is equal to project root",
    UnsafeReason.IS_WORKING_DIRECTORY: "is working directory",
    UnsafeReason.IS_BOUNDARY_ANCESTOR: "is an ancestor of project root",
}


@dataclass(frozen=True)
class SweepEntry:
    """Outcome for one requested path."""

    path: Optional[str]
    output: str

    @property
    def removed(self) -> bool:
        return self.output.startswith("removed")


def sweep_paths(
    paths: str | Iterable[str],
    root: str | Path,
    *,
    exclude: Iterable[str] = (),
    dry_run: bool = False,
    allow_outside: bool = False,
    cwd: Optional[str | Path] = None,
    logger: Optional[JanitorLogger] = None,
    normalizer: Optional[PathNormalizer] = None,
) -> list[SweepEntry]:
    """Remove ``paths`` relative to ``root``.

    Args:
        paths: A path or list of paths, relative to ``root`` or absolute
        root: Absolute project root; nothing outside it is removed
        exclude: Child names kept when a listed path is a directory
        dry_run: Report without removing
        allow_outside: Allow paths outside ``root``
        cwd: Working directory protected from removal
        logger: Janitor logger receiving one line per entry
        normalizer: Path comparison strategy

    Returns:
        One SweepEntry per requested path (or a single entry explaining why
        nothing was attempted)
    """
    if isinstance(paths, (str, os.PathLike)):
        paths = [os.fspath(paths)]
    paths = list(paths)
    exclude = list(exclude)
    root = os.fspath(root)
    normalizer = normalizer or default_normalizer()
    executor = FilesystemDeletionExecutor()

    entries: list[SweepEntry] = []

    def record(path: Optional[str], output: str) -> None:
        entries.append(SweepEntry(path, output))
        if logger is not None:
            logger.warning(f"{path} {output}")

    if not paths:
        record(None, "nothing to clean")
        return entries

    if not os.path.isabs(root):
        record(root, "project root must be an absolute path. Skipping all...")
        return entries

    root = os.path.normpath(root)
    for requested in paths:
        verdict = is_safe_to_delete(
            requested, root, allow_outside, cwd=cwd, normalizer=normalizer
        )
        if not verdict.safe:
            record(verdict.path, SWEEP_MESSAGES[verdict.reason])
            continue

        target = verdict.path
        kept: list[str] = []
        children: list[str] = []
        if exclude and os.path.isdir(target) and not os.path.islink(target):
            for name in sorted(os.listdir(target)):
                if name in exclude:
                    kept.append(name)
                else:
                    children.append(name)
            if "." in exclude:
                kept.append(".")

        if kept:
            outcome = executor.delete_sync(children, target, dry_run)
            output = f"removed with exclusions ({len(kept)})"
        else:
            outcome = executor.delete_sync(
                [os.path.basename(target)], os.path.dirname(target), dry_run
            )
            output = "removed"

        for error in outcome.errors:
            log.warning(f"{target}: {error}")
            if logger is not None:
                logger.error(f"{target} {error}")
        record(target, output)

    return entries
