"""Cleanup orchestrator.

Subscribes to a build host's lifecycle and decides when to clean:

- once, before the first successful build (``clean_once_before_build_patterns``)
- after every successful build (stale assets plus
  ``clean_after_every_build_patterns``)
- never while the build reports errors

Every resolved path is checked by the boundary guard before the deletion
executor sees it. The asset ledger is committed only after a batch settles,
so a failed or interrupted cycle is simply recomputed next time.
"""

import asyncio
import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from build_janitor.cleanup.executor import DeletionExecutor, FilesystemDeletionExecutor
from build_janitor.cleanup.result import CleanupResult
from build_janitor.config.options import CleanupOptions
from build_janitor.errors import JanitorError
from build_janitor.hosts import BuildLifecycle, BuildReport, select_lifecycle
from build_janitor.ledger import AssetLedger
from build_janitor.patterns.resolver import PatternResolver
from build_janitor.utils.boundaries import ensure_safe_to_delete
from build_janitor.utils.logging import JanitorLogger
from build_janitor.utils.paths import PathNormalizer, default_normalizer

logger = logging.getLogger(__name__)


class CleanupState(str, Enum):
    """Lifecycle state of an orchestrator."""

    IDLE = "idle"
    INITIAL_CLEAN_PENDING = "initial_clean_pending"
    INITIAL_CLEAN_DONE = "initial_clean_done"
    STEADY_STATE = "steady_state"
    ERROR_PAUSE = "error_pause"
    DISABLED = "disabled"


class CleanupOrchestrator:
    """Coordinates pattern resolution, boundary checks and deletion per build.

    Usage:
        janitor = CleanupOrchestrator({"clean_after_every_build_patterns": ["*.tmp"]})
        janitor.apply(compiler)

    Or, without a build host:
        janitor = CleanupOrchestrator()
        janitor.bind("/project/dist")
        await janitor.run_once(StaticBuildReport(assets=["bundle.js"]))
    """

    def __init__(
        self,
        options: Any = None,
        *,
        executor: Optional[DeletionExecutor] = None,
        logger: Optional[JanitorLogger] = None,
        normalizer: Optional[PathNormalizer] = None,
        cwd: Optional[str | Path] = None,
    ):
        """Initialize the orchestrator.

        Args:
            options: ``CleanupOptions``, an options mapping or None for defaults
            executor: Deletion executor (filesystem by default)
            logger: Janitor logger (console logger by default)
            normalizer: Path comparison strategy (platform default)
            cwd: Working directory protected from deletion (process cwd by default)

        Raises:
            ConfigurationError: If the options are malformed or use legacy names
        """
        self.options = CleanupOptions.coerce(options)
        self.executor = executor or FilesystemDeletionExecutor()
        self.logger = logger or JanitorLogger(self.options.namespace)
        self.normalizer = normalizer or default_normalizer()
        self.resolver = PatternResolver(self.normalizer)
        self.cwd = os.fspath(cwd) if cwd is not None else None

        self.ledger = AssetLedger()
        self.state = CleanupState.IDLE
        self.lifecycle: Optional[BuildLifecycle] = None
        self.output_path: Optional[str] = None
        self.boundary: Optional[str] = None
        self.ledger_path: Optional[str] = None

        self._initial_clean_done = False
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock_guard = threading.Lock()

    @property
    def initial_clean_done(self) -> bool:
        return self._initial_clean_done

    def apply(self, compiler: Any) -> None:
        """Register with a build host.

        Args:
            compiler: Host compiler object (tappable ``hooks`` or legacy ``plugin``)

        Raises:
            ConfigurationError: If the compiler exposes no supported plugin API
        """
        lifecycle = select_lifecycle(compiler)
        output_path = lifecycle.output_path
        if not output_path:
            self.logger.warning("options.output.path not defined. Plugin disabled...")
            self.state = CleanupState.DISABLED
            return

        self.lifecycle = lifecycle
        self.bind(output_path)

        if self.options.clean_once_before_build_patterns:
            lifecycle.on_after_compile(self.handle_initial)
        lifecycle.on_done(self.handle_done)
        logger.debug(f"Registered with {type(lifecycle).__name__} for {output_path}")

    def bind(self, output_path: str | Path) -> None:
        """Fix the output directory and boundary, and load a persisted ledger.

        Called by ``apply``; call it directly when driving the orchestrator
        without a build host.

        Raises:
            JanitorError: If a build cycle has already started
            LedgerError: If ``ledger_file`` exists but is corrupt
        """
        running = self._lock is not None and self._lock.locked()
        if running or self.state not in (CleanupState.IDLE, CleanupState.DISABLED):
            raise JanitorError(
                f"{self.options.namespace}: output directory and boundary are fixed "
                f"once a build cycle has started"
            )

        self.output_path = os.path.abspath(os.fspath(output_path))
        if self.options.boundary is not None:
            self.boundary = os.fspath(self.options.boundary)
        else:
            self.boundary = self.output_path

        if self.options.ledger_file is not None:
            self.ledger_path = os.path.join(
                self.output_path, os.fspath(self.options.ledger_file)
            )
            self.ledger = AssetLedger.load(self.ledger_path)
            # a persisted build means the initial clean already ran
            self._initial_clean_done = self.ledger.builds_recorded > 0

        if self.state == CleanupState.DISABLED:
            self.state = CleanupState.IDLE

    def _cycle_lock(self) -> asyncio.Lock:
        """Return the lock serializing cycles on the running event loop.

        Legacy hosts drive each handler on a fresh event loop, so the lock is
        replaced when the loop changes. It is never replaced while a cycle on
        the previous loop still holds it.

        Raises:
            JanitorError: If a cycle is still running on another event loop
        """
        loop = asyncio.get_running_loop()
        with self._lock_guard:
            if self._lock is None or self._lock_loop is not loop:
                if self._lock is not None and self._lock.locked():
                    raise JanitorError(
                        f"{self.options.namespace}: a cleanup cycle is already running "
                        f"on another event loop"
                    )
                self._lock = asyncio.Lock()
                self._lock_loop = loop
            return self._lock

    def _require_bound(self) -> bool:
        if self.state == CleanupState.DISABLED:
            return False
        if self.output_path is None:
            raise JanitorError(
                f"{self.options.namespace}: no output directory; call apply() or bind() first"
            )
        return True

    def _protected(self, assets: list[str]) -> list[str]:
        protect = list(assets) if self.options.protect_current_assets else []
        if self.ledger_path is not None:
            protect.append(os.path.relpath(self.ledger_path, self.output_path))
        return protect

    async def handle_initial(self, report: BuildReport) -> Optional[CleanupResult]:
        """Run the once-before-build patterns on the first successful compile.

        Returns:
            CleanupResult, or None if nothing ran
        """
        if not self._require_bound():
            return None

        async with self._cycle_lock():
            patterns = self.options.clean_once_before_build_patterns
            if self._initial_clean_done or not patterns:
                return None

            if report.has_errors():
                self.state = CleanupState.INITIAL_CLEAN_PENDING
                return None

            # latched before deleting: a safety error must not re-run it
            self._initial_clean_done = True
            paths = self.resolver.resolve(
                patterns,
                self.output_path,
                self._protected(report.list_output_assets()),
            )
            result = await self._remove(paths)
            self.state = CleanupState.INITIAL_CLEAN_DONE
            return result

    async def handle_done(self, report: BuildReport) -> Optional[CleanupResult]:
        """Remove stale assets and the after-every-build patterns.

        Returns:
            CleanupResult, or None if the build had errors
        """
        if not self._require_bound():
            return None

        async with self._cycle_lock():
            if report.has_errors():
                self.state = CleanupState.ERROR_PAUSE
                if self.options.verbose:
                    self.logger.paused()
                return None

            assets = report.list_output_assets()
            protect = self._protected(assets)

            stale: list[str] = []
            if self.options.remove_stale_assets_automatically:
                stale = self.ledger.stale_against(assets)

            paths = set(self.resolver.resolve_literals(stale, self.output_path, protect))
            paths.update(
                self.resolver.resolve(
                    self.options.clean_after_every_build_patterns,
                    self.output_path,
                    protect,
                )
            )

            result = await self._remove(sorted(paths))

            self.ledger.commit(assets)
            if self.ledger_path is not None:
                self.ledger.save(self.ledger_path)
            self.state = CleanupState.STEADY_STATE
            return result

    async def run_once(self, report: BuildReport) -> CleanupResult:
        """Single pass for non-watch builds: initial clean, then the done cycle."""
        result = CleanupResult()
        initial = await self.handle_initial(report)
        if initial is not None:
            result.merge(initial)
        done = await self.handle_done(report)
        if done is not None:
            result.merge(done)
        return result

    async def _remove(self, paths: list[str]) -> CleanupResult:
        """Guard every path, then hand the approved ones to the executor.

        The whole batch is vetted before anything is deleted.

        Raises:
            SafetyViolationError: If a path is outside the boundary without override
        """
        result = CleanupResult()
        if not paths:
            return result

        approved: list[str] = []
        for path in paths:
            verdict = ensure_safe_to_delete(
                os.path.join(self.output_path, path),
                self.boundary,
                self.options.allow_outside_boundary,
                cwd=self.cwd,
                normalizer=self.normalizer,
                namespace=self.options.namespace,
            )
            if verdict.safe:
                approved.append(path)
            else:
                result.skipped.append(path)
                self.logger.warning(f"skipping {path}: {verdict.reason.value}")

        if not approved:
            return result

        batch = await self.executor.delete(approved, self.output_path, self.options.dry_run)
        result.merge(batch)

        if self.options.verbose:
            for entry in batch.entries:
                self.logger.removed(entry.path, self.options.dry_run)
        for error in batch.errors:
            self.logger.warning(error)
        return result
