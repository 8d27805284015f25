"""Resolve pattern sets into concrete, sorted path lists.

Patterns are evaluated in order. A positive pattern adds every existing path
it matches; a ``!negated`` pattern removes previously matched paths from the
accumulated set (it does not block later positive patterns). The ``protect``
list is applied last and always wins.

Removing a path from the result also removes its ancestor directories:
deleting a matched directory would otherwise take the kept path with it.
"""

import logging
import os
from collections.abc import Iterable, Sequence
from typing import Optional

from build_janitor.patterns.glob_syntax import GlobPattern, compile_glob
from build_janitor.utils.paths import PathNormalizer, default_normalizer, to_posix

logger = logging.getLogger(__name__)


class PatternResolver:
    """Expands glob pattern sets against a base directory."""

    def __init__(self, normalizer: Optional[PathNormalizer] = None):
        """Initialize the resolver.

        Args:
            normalizer: Path comparison strategy (defaults to the platform's)
        """
        self.normalizer = normalizer or default_normalizer()

    def compile(self, patterns: Sequence[str], base_dir: str) -> list[GlobPattern]:
        """Compile every pattern up front so syntax errors surface immediately."""
        case_sensitive = self.normalizer.case_sensitive
        return [compile_glob(pattern, base_dir, case_sensitive) for pattern in patterns]

    def resolve(
        self,
        patterns: Sequence[str],
        base_dir: str | os.PathLike,
        protect: Iterable[str] = (),
    ) -> list[str]:
        """Resolve ``patterns`` into relative paths under ``base_dir``.

        Args:
            patterns: Ordered glob patterns, ``!`` prefix negates
            base_dir: Directory patterns are relative to
            protect: Paths (relative to ``base_dir``) that are never returned

        Returns:
            Sorted, unique relative POSIX paths

        Raises:
            PatternSyntaxError: If any pattern is malformed
        """
        if not patterns:
            return []

        base = os.path.abspath(os.fspath(base_dir))
        compiled = self.compile(patterns, base)

        matched: dict[str, str] = {}
        kept: dict[str, str] = {}
        for pattern in compiled:
            if pattern.negated:
                for key, path in list(matched.items()):
                    if pattern.matches(path, self.normalizer.same):
                        del matched[key]
                        kept[key] = path
                continue

            for path in pattern.expand():
                key = self.normalizer.normalize(path)
                matched[key] = path
                kept.pop(key, None)

        logger.debug(
            f"Resolved {len(patterns)} pattern(s) in {base}: {len(matched)} match(es)"
        )
        return self._finalize(matched, kept, base, protect)

    def resolve_literals(
        self,
        paths: Iterable[str],
        base_dir: str | os.PathLike,
        protect: Iterable[str] = (),
    ) -> list[str]:
        """Normalize literal relative paths and apply ``protect``.

        Used for stale build assets, whose names are never glob patterns.
        Paths that no longer exist are kept; deleting them is a no-op.
        """
        base = os.path.abspath(os.fspath(base_dir))
        matched: dict[str, str] = {}
        for path in paths:
            absolute = os.path.normpath(os.path.join(base, path))
            matched[self.normalizer.normalize(absolute)] = absolute
        return self._finalize(matched, {}, base, protect)

    def _finalize(
        self,
        matched: dict[str, str],
        kept: dict[str, str],
        base: str,
        protect: Iterable[str],
    ) -> list[str]:
        kept = dict(kept)
        for path in protect:
            absolute = os.path.normpath(os.path.join(base, path))
            key = self.normalizer.normalize(absolute)
            matched.pop(key, None)
            kept[key] = absolute

        shielded = self._ancestor_keys(kept.values(), base)
        result = {
            self.relative(path, base)
            for key, path in matched.items()
            if key not in shielded
        }
        return sorted(result)

    def _ancestor_keys(self, paths: Iterable[str], base: str) -> set[str]:
        keys: set[str] = set()
        for path in paths:
            parent = os.path.dirname(path)
            while parent and parent != path:
                key = self.normalizer.normalize(parent)
                if key in keys:
                    break
                keys.add(key)
                path, parent = parent, os.path.dirname(parent)
        return keys

    @staticmethod
    def relative(path: str, base: str) -> str:
        """Render ``path`` relative to ``base`` with forward slashes."""
        try:
            return to_posix(os.path.relpath(path, base))
        except ValueError:
            # different drive
            return to_posix(path)


def resolve(
    patterns: Sequence[str],
    base_dir: str | os.PathLike,
    protect: Iterable[str] = (),
    *,
    normalizer: Optional[PathNormalizer] = None,
) -> list[str]:
    """Module-level shortcut for ``PatternResolver(normalizer).resolve(...)``."""
    return PatternResolver(normalizer).resolve(patterns, base_dir, protect)
