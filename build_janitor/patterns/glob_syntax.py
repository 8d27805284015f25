"""Glob pattern compilation.

Matching and expansion go through ``wcmatch.glob`` with ``**`` (globstar),
``{a,b}`` alternation and dotfile matching enabled. On top of that:

- a leading ``!`` negates the pattern
- a trailing ``/`` restricts the pattern to directories
- the literal prefix of a pattern is resolved against the base directory,
  so ``../coverage/*`` and absolute patterns work as expected

Patterns are checked eagerly so that syntax errors surface as soon as a
pattern set is resolved, never halfway through a deletion batch.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional

from wcmatch import glob

from build_janitor.errors import PatternSyntaxError
from build_janitor.utils.paths import to_posix

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB


@dataclass(frozen=True)
class GlobPattern:
    """A pattern anchored at an absolute literal root."""

    source: str
    negated: bool
    root: str
    pattern: Optional[str]
    flags: int = GLOB_FLAGS
    dir_only: bool = False

    @property
    def literal(self) -> bool:
        return self.pattern is None

    def matches(self, path: str, same=None) -> bool:
        """Check an absolute path against this pattern.

        Args:
            path: Absolute, normalized path
            same: Optional equality predicate for literal patterns
        """
        if self.dir_only and not os.path.isdir(path):
            return False
        if self.pattern is None:
            if same is not None:
                return same(path, self.root)
            return os.path.normpath(path) == self.root
        relative = _relative_to(path, self.root)
        if relative is None:
            return False
        return glob.globmatch(relative, self.pattern, flags=self.flags)

    def expand(self) -> Iterator[str]:
        """Yield existing absolute paths matched by this pattern."""
        if self.pattern is None:
            if os.path.lexists(self.root) and (not self.dir_only or os.path.isdir(self.root)):
                yield self.root
            return

        if not os.path.isdir(self.root):
            return

        for relative in glob.iglob(self.pattern, flags=self.flags, root_dir=self.root):
            full = os.path.normpath(os.path.join(self.root, relative))
            # ``**`` also matches its own root
            if full == self.root:
                continue
            if self.dir_only and not os.path.isdir(full):
                continue
            yield full


def _relative_to(path: str, root: str) -> Optional[str]:
    try:
        relative = os.path.relpath(path, root)
    except ValueError:
        return None
    if relative == os.curdir or relative == os.pardir or relative.startswith(os.pardir + os.sep):
        return None
    return to_posix(relative)


def check_syntax(body: str, pattern: str) -> None:
    """Reject dangling escapes, unterminated classes and unbalanced braces.

    ``wcmatch`` itself reads them as literal characters.

    Raises:
        PatternSyntaxError: If ``body`` is malformed
    """
    depth = 0
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\":
            if i + 1 >= len(body):
                raise PatternSyntaxError(pattern, "trailing escape character")
            i += 2
            continue
        if char == "[":
            i = _class_end(body, i)
            if i == -1:
                raise PatternSyntaxError(pattern, "unterminated character class")
        elif char == "{":
            depth += 1
        elif char == "}" and depth:
            depth -= 1
        i += 1
    if depth:
        raise PatternSyntaxError(pattern, "unbalanced brace")


def _class_end(text: str, start: int) -> int:
    i = start + 1
    if i < len(text) and text[i] in "!^":
        i += 1
    if i < len(text) and text[i] == "]":
        i += 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == "]":
            return i
        i += 1
    return -1


def compile_glob(
    pattern: str,
    base_dir: str,
    case_sensitive: bool = True,
) -> GlobPattern:
    """Compile ``pattern`` relative to the absolute ``base_dir``.

    Raises:
        PatternSyntaxError: If the pattern is empty or malformed
    """
    if not isinstance(pattern, str) or not pattern:
        raise PatternSyntaxError(str(pattern), "empty pattern")

    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    if not body:
        raise PatternSyntaxError(pattern, "negation without a pattern")

    dir_only = len(body) > 1 and body.endswith("/")
    if dir_only:
        body = body.rstrip("/")

    check_syntax(body, pattern)

    flags = GLOB_FLAGS if case_sensitive else GLOB_FLAGS | glob.IGNORECASE
    segments = body.split("/")
    first_magic = next(
        (
            index
            for index, segment in enumerate(segments)
            if "\\" in segment or glob.is_magic(segment, flags=flags)
        ),
        len(segments),
    )
    prefix = "/".join(segments[:first_magic])
    if not prefix and body.startswith("/"):
        prefix = "/"
    # an absolute prefix discards base_dir
    root = os.path.normpath(os.path.join(base_dir, prefix))

    rest = segments[first_magic:]
    if not rest:
        return GlobPattern(pattern, negated, root, None, flags, dir_only)
    return GlobPattern(pattern, negated, root, "/".join(rest), flags, dir_only)
