"""Adapter for hosts exposing tappable ``compiler.hooks``."""

from typing import Any

from build_janitor.hosts.base import BuildLifecycle, LifecycleHandler, as_report


class HookedLifecycle(BuildLifecycle):
    """Registers coroutine handlers through ``hooks.<event>.tap_async``.

    The host awaits each tapped coroutine before moving on, which gives the
    single-flight guarantee the orchestrator relies on.
    """

    def on_after_compile(self, handler: LifecycleHandler) -> None:
        async def tapped(compilation: Any) -> None:
            await handler(as_report(compilation))

        self.compiler.hooks.after_compile.tap_async(self.plugin_name, tapped)

    def on_done(self, handler: LifecycleHandler) -> None:
        async def tapped(stats: Any) -> None:
            await handler(as_report(stats))

        self.compiler.hooks.done.tap_async(self.plugin_name, tapped)
