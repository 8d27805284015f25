"""Deletion boundary enforcement.

Every path the janitor is about to remove is checked here first. Checks are
made per path, not per pattern, because glob expansion can surface paths that
escape the intended directory (``..`` segments, absolute patterns, symlinked
parent directories).

A path is unsafe when it is:
- the boundary itself
- the process working directory
- an ancestor of the boundary (the filesystem root included)
- outside the boundary, unless ``allow_outside`` is set

Only the last rule can be lifted.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from build_janitor.errors import SafetyViolationError
from build_janitor.utils.paths import PathNormalizer, default_normalizer


class UnsafeReason(str, Enum):
    """Why a candidate path may not be deleted."""

    IS_BOUNDARY = "is equal to the boundary"
    IS_WORKING_DIRECTORY = "is working directory"
    IS_BOUNDARY_ANCESTOR = "is an ancestor of the boundary"
    OUTSIDE_BOUNDARY = "must be inside the boundary"


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of a single boundary check."""

    safe: bool
    path: str
    reason: Optional[UnsafeReason] = None

    @property
    def needs_override(self) -> bool:
        """True when only ``allow_outside`` would make this path deletable."""
        return self.reason == UnsafeReason.OUTSIDE_BOUNDARY


def resolve_candidate(candidate: str | Path, base_dir: Optional[str | Path] = None) -> str:
    """Make ``candidate`` absolute and collapse its parent directories.

    The parent is resolved through symlinks while the final component is
    kept: removing a symlink only removes the link, so a link is judged by
    where it sits rather than where it points.
    """
    candidate = os.fspath(candidate)
    if base_dir is not None and not os.path.isabs(candidate):
        candidate = os.path.join(os.fspath(base_dir), candidate)
    absolute = os.path.normpath(os.path.abspath(candidate))
    parent, name = os.path.split(absolute)
    if not name:
        return absolute
    return os.path.join(os.path.realpath(parent), name)


def is_safe_to_delete(
    candidate: str | Path,
    boundary: str | Path,
    allow_outside: bool = False,
    *,
    cwd: Optional[str | Path] = None,
    normalizer: Optional[PathNormalizer] = None,
) -> SafetyVerdict:
    """Check whether deleting ``candidate`` stays within ``boundary``.

    Args:
        candidate: Path to check; relative paths are taken from ``boundary``
        boundary: Absolute directory outside of which deletion is refused
        allow_outside: Lift the outside-boundary rule
        cwd: Working directory to protect (defaults to ``os.getcwd()``)
        normalizer: Comparison strategy (defaults to the platform's)

    Returns:
        SafetyVerdict describing the outcome
    """
    normalizer = normalizer or default_normalizer()
    boundary_path = os.path.realpath(os.path.abspath(os.fspath(boundary)))
    working_dir = os.path.realpath(os.fspath(cwd) if cwd is not None else os.getcwd())
    path = resolve_candidate(candidate, boundary_path)

    if normalizer.same(path, boundary_path):
        return SafetyVerdict(False, path, UnsafeReason.IS_BOUNDARY)

    if normalizer.same(path, working_dir):
        return SafetyVerdict(False, path, UnsafeReason.IS_WORKING_DIRECTORY)

    if normalizer.is_within(boundary_path, path):
        return SafetyVerdict(False, path, UnsafeReason.IS_BOUNDARY_ANCESTOR)

    if not normalizer.is_within(path, boundary_path) and not allow_outside:
        return SafetyVerdict(False, path, UnsafeReason.OUTSIDE_BOUNDARY)

    return SafetyVerdict(True, path)


def ensure_safe_to_delete(
    candidate: str | Path,
    boundary: str | Path,
    allow_outside: bool = False,
    *,
    cwd: Optional[str | Path] = None,
    normalizer: Optional[PathNormalizer] = None,
    namespace: str = "build-janitor",
) -> SafetyVerdict:
    """Like ``is_safe_to_delete`` but raise for outside-boundary targets.

    The other unsafe reasons are returned to the caller, which skips them.

    Raises:
        SafetyViolationError: If the path is outside the boundary without override
    """
    verdict = is_safe_to_delete(
        candidate, boundary, allow_outside, cwd=cwd, normalizer=normalizer
    )
    if verdict.needs_override:
        raise SafetyViolationError(verdict.path, boundary, namespace=namespace)
    return verdict
