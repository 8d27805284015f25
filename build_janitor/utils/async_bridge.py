"""Async/sync bridge for hosts that only offer synchronous callbacks.

The orchestrator's lifecycle handlers are coroutines. Older host APIs invoke
plugins synchronously, so their adapter drives each handler to completion
with ``run_async`` before returning control to the host.

Usage:
    from build_janitor.utils.async_bridge import run_async

    run_async(orchestrator.handle_done(report))
"""

import asyncio
import atexit
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine
from typing import Any, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Shared executor used when a synchronous host callback fires inside a running loop
_thread_pool: Optional[concurrent.futures.ThreadPoolExecutor] = None
_thread_pool_lock = threading.Lock()


def _get_thread_pool() -> concurrent.futures.ThreadPoolExecutor:
    """Get or create the module-level ThreadPoolExecutor."""
    global _thread_pool
    if _thread_pool is None:
        with _thread_pool_lock:
            if _thread_pool is None:
                # one worker: cleanup cycles must never overlap
                _thread_pool = concurrent.futures.ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="janitor_bridge_"
                )
                logger.debug("Created janitor bridge ThreadPoolExecutor")
    return _thread_pool


def _shutdown_thread_pool() -> None:
    """Shutdown the thread pool on interpreter exit."""
    global _thread_pool
    if _thread_pool is not None:
        _thread_pool.shutdown(wait=False)
        _thread_pool = None


atexit.register(_shutdown_thread_pool)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from synchronous code.

    Without a running loop the coroutine runs under ``asyncio.run``. Inside a
    running loop it runs on a private loop in the bridge thread, and the
    caller blocks until it settles.

    Args:
        coro: The coroutine to run

    Returns:
        The result of the coroutine
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is None:
        return asyncio.run(coro)

    def run_in_thread() -> T:
        new_loop = asyncio.new_event_loop()
        asyncio.set_event_loop(new_loop)
        try:
            return new_loop.run_until_complete(coro)
        finally:
            new_loop.close()

    future = _get_thread_pool().submit(run_in_thread)
    return future.result()
