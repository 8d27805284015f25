"""Glob pattern compilation and resolution."""

from build_janitor.patterns.glob_syntax import GlobPattern, compile_glob
from build_janitor.patterns.resolver import PatternResolver, resolve

__all__ = [
    "GlobPattern",
    "PatternResolver",
    "compile_glob",
    "resolve",
]
