"""Path normalization used for safety comparisons.

Comparisons between candidate paths and the boundary never touch the
filesystem themselves; they go through a ``PathNormalizer`` so the
case-insensitive rules of Windows volumes live in one place.
"""

import ntpath
import os
import posixpath
import re
import sys
from abc import ABC, abstractmethod

_SEPARATORS = re.compile(r"[\\/]+")
_DRIVE = re.compile(r"^([a-zA-Z]):")


class PathNormalizer(ABC):
    """Turns an absolute path into a comparable tuple of parts."""

    case_sensitive: bool = True

    @abstractmethod
    def normalize(self, path: str) -> str:
        """Return the canonical string form of ``path``."""

    def parts(self, path: str) -> tuple[str, ...]:
        """Split a normalized path into components (root kept as first part)."""
        normalized = self.normalize(path)
        pieces = [p for p in _SEPARATORS.split(normalized) if p]
        if normalized[:1] in ("/", "\\"):
            return ("/", *pieces)
        return tuple(pieces)

    def same(self, left: str, right: str) -> bool:
        return self.parts(left) == self.parts(right)

    def is_within(self, child: str, parent: str) -> bool:
        """True if ``child`` equals ``parent`` or lies underneath it."""
        child_parts = self.parts(child)
        parent_parts = self.parts(parent)
        return child_parts[: len(parent_parts)] == parent_parts


class PosixNormalizer(PathNormalizer):
    """Case-sensitive normalization for POSIX filesystems."""

    def normalize(self, path: str) -> str:
        return posixpath.normpath(path)


class CaseInsensitiveNormalizer(PathNormalizer):
    """Normalization for case-insensitive volumes.

    Drive letters are upper-cased, both separators are accepted and the
    remaining path is case-folded.
    """

    case_sensitive = False

    def normalize(self, path: str) -> str:
        normalized = ntpath.normpath(path).replace("/", "\\")
        match = _DRIVE.match(normalized)
        if match:
            drive = match.group(1).upper()
            return f"{drive}:{normalized[2:].casefold()}"
        return normalized.casefold()


def default_normalizer() -> PathNormalizer:
    """Pick the normalizer matching the running platform."""
    if sys.platform == "win32":
        return CaseInsensitiveNormalizer()
    return PosixNormalizer()


def to_posix(path: str) -> str:
    """Render a relative path with forward slashes."""
    return path.replace(os.sep, "/") if os.sep != "/" else path
