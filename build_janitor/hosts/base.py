"""Internal lifecycle interface between the orchestrator and a build host.

Build hosts come in two incompatible API generations. Rather than sniffing
for features throughout the cleanup logic, one adapter per generation is
selected when the orchestrator is applied, and the orchestrator only ever
sees ``BuildLifecycle`` and ``BuildReport``.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class BuildReport(Protocol):
    """What the janitor needs to know about a finished (or compiled) build."""

    def has_errors(self) -> bool:
        ...

    def list_output_assets(self) -> list[str]:
        """Output files, relative to the build's output directory."""
        ...


LifecycleHandler = Callable[[BuildReport], Awaitable[Any]]


class StatsReport:
    """Adapts a host ``stats`` object to ``BuildReport``.

    The stats object must provide ``has_errors()`` and
    ``to_json(assets=True)`` returning a mapping with an ``assets`` list of
    ``{"name": ...}`` entries.
    """

    def __init__(self, stats: Any):
        self.stats = stats

    def has_errors(self) -> bool:
        return bool(self.stats.has_errors())

    def list_output_assets(self) -> list[str]:
        data = self.stats.to_json(assets=True) or {}
        assets = data.get("assets") or []
        return [asset["name"] for asset in assets]


def as_report(obj: Any) -> BuildReport:
    """Wrap a host compilation or stats object as a ``BuildReport``."""
    if isinstance(obj, BuildReport):
        return obj
    if hasattr(obj, "get_stats"):
        return StatsReport(obj.get_stats())
    return StatsReport(obj)


def _lookup(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def read_output_path(compiler: Any) -> Optional[str]:
    """Return the host's configured output directory, if any.

    Accepts ``compiler.output_path`` or ``compiler.options.output.path``
    (attributes or mapping keys).
    """
    path = getattr(compiler, "output_path", None)
    if path:
        return str(path)
    output = _lookup(_lookup(compiler, "options"), "output")
    path = _lookup(output, "path")
    return str(path) if path else None


class BuildLifecycle(ABC):
    """Lifecycle events the orchestrator subscribes to."""

    #: Name under which handlers are registered with the host
    plugin_name = "build-janitor"

    def __init__(self, compiler: Any):
        self.compiler = compiler

    @property
    def output_path(self) -> Optional[str]:
        return read_output_path(self.compiler)

    @abstractmethod
    def on_after_compile(self, handler: LifecycleHandler) -> None:
        """Call ``handler`` after each compilation, before assets are emitted."""

    @abstractmethod
    def on_done(self, handler: LifecycleHandler) -> None:
        """Call ``handler`` after each build has finished."""
