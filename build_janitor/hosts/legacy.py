"""Adapter for hosts with the older ``compiler.plugin(event, fn)`` API.

Legacy hosts call plugins synchronously. ``after-compile`` handlers receive a
node-style ``callback`` that must be invoked (with the error, if any) once
the handler is finished; ``done`` handlers simply return.
"""

import logging
from collections.abc import Callable
from typing import Any, Optional

from build_janitor.hosts.base import BuildLifecycle, LifecycleHandler, as_report
from build_janitor.utils.async_bridge import run_async

logger = logging.getLogger(__name__)


class LegacyLifecycle(BuildLifecycle):
    """Drives coroutine handlers to completion inside synchronous callbacks."""

    def on_after_compile(self, handler: LifecycleHandler) -> None:
        def plugin(compilation: Any, callback: Callable[[Optional[BaseException]], Any]) -> None:
            try:
                run_async(handler(as_report(compilation)))
            except Exception as e:
                logger.debug(f"after-compile handler failed: {e}")
                callback(e)
                return
            callback(None)

        self.compiler.plugin("after-compile", plugin)

    def on_done(self, handler: LifecycleHandler) -> None:
        def plugin(stats: Any) -> None:
            run_async(handler(as_report(stats)))

        self.compiler.plugin("done", plugin)
