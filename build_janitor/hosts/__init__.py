"""Build host adapters.

``select_lifecycle`` inspects a compiler object once and returns the adapter
for its plugin API generation.
"""

from typing import Any

from build_janitor.errors import ConfigurationError
from build_janitor.hosts.base import (
    BuildLifecycle,
    BuildReport,
    LifecycleHandler,
    StatsReport,
    as_report,
    read_output_path,
)
from build_janitor.hosts.hooked import HookedLifecycle
from build_janitor.hosts.legacy import LegacyLifecycle
from build_janitor.hosts.static import StaticBuildReport


def select_lifecycle(compiler: Any) -> BuildLifecycle:
    """Pick the lifecycle adapter matching ``compiler``'s plugin API.

    Raises:
        ConfigurationError: If the compiler exposes neither ``hooks`` nor ``plugin``
    """
    if getattr(compiler, "hooks", None) is not None:
        return HookedLifecycle(compiler)
    if callable(getattr(compiler, "plugin", None)):
        return LegacyLifecycle(compiler)
    raise ConfigurationError(
        f"Unsupported compiler {type(compiler).__name__!r}: "
        "expected a `hooks` object or a `plugin(event, fn)` method"
    )


__all__ = [
    "BuildLifecycle",
    "BuildReport",
    "HookedLifecycle",
    "LegacyLifecycle",
    "LifecycleHandler",
    "StaticBuildReport",
    "StatsReport",
    "as_report",
    "read_output_path",
    "select_lifecycle",
]
