"""Configuration package for cleanup options.

Provides the immutable options model and loading from
``.build-janitor.json`` with environment overrides.
"""

from .loader import (
    CONFIG_FILE_NAME,
    JanitorSettings,
    load_cleanup_options,
)
from .options import DEFAULT_NAMESPACE, LEGACY_OPTIONS, CleanupOptions

__all__ = [
    "CleanupOptions",
    "JanitorSettings",
    "CONFIG_FILE_NAME",
    "DEFAULT_NAMESPACE",
    "LEGACY_OPTIONS",
    "load_cleanup_options",
]
