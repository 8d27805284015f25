"""Filesystem helpers for building output trees in tests."""

from pathlib import Path


def write_files(base: Path, *names: str) -> None:
    """Create files (and their parent directories) under ``base``."""
    for name in names:
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(name)


def listing(base: Path) -> list[str]:
    """Sorted relative POSIX paths of every file and directory under ``base``."""
    return sorted(p.relative_to(base).as_posix() for p in base.rglob("*"))
