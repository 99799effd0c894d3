"""Matrix coordinator — bounded concurrency and interrupt-safe shutdown.

The coordinator runs one task per toolchain entry of the matrix, never more
than ``par`` at a time.  Inside a task the steps are strictly sequential:
materialize the workspace, pin dependencies, then run every feature
combination in turn.

Interruption (SIGINT/SIGTERM) follows a fixed sequence:

1. set the cancellation flag so no new toolchain task (or combination)
   is started;
2. wait ``shutdown_grace_seconds`` for in-flight work;
3. cancel whatever is still running, which kills its child process;
4. wait for workspace copies still running in worker threads;
5. recursively delete every path in the cleanup registry.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Sequence

from cratematrix.config import RunnerSettings
from cratematrix.core.cleanup import CleanupRegistry
from cratematrix.core.commands import CommandRunner
from cratematrix.core.errors import MatrixError
from cratematrix.core.executor import RunExecutor
from cratematrix.core.matrix import FeatureSet, Matrix
from cratematrix.core.pinner import DependencyPinner
from cratematrix.core.workspace import Workspace, WorkspaceManager
from cratematrix.models.config import MatrixConfig
from cratematrix.models.results import MatrixReport, ToolchainFailure
from cratematrix.models.versioning import ToolchainVersion
from cratematrix.report.renderer import ReportRenderer

logger = logging.getLogger(__name__)

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class MatrixCoordinator:
    """Schedules toolchain tasks and owns the shutdown path.

    Parameters
    ----------
    config:
        The matrix configuration; read-only for the whole run.
    settings:
        Runner settings (grace period, workspace retention).
    runner:
        Backend used for every external command.
    renderer:
        Renderer for failure output.  A default one is created if omitted.
    handle_signals:
        Install SIGINT/SIGTERM handlers for the duration of ``execute``.
    """

    def __init__(
        self,
        config: MatrixConfig,
        settings: RunnerSettings,
        runner: CommandRunner,
        *,
        renderer: ReportRenderer | None = None,
        handle_signals: bool = True,
    ) -> None:
        self._config = config
        self._settings = settings
        self._handle_signals = handle_signals

        self.registry = CleanupRegistry()
        self.workspaces = WorkspaceManager(self.registry, settings)
        self.pinner = DependencyPinner(runner, settings)
        self.executor = RunExecutor(runner, settings, renderer)

        self._cancel = asyncio.Event()
        self._interrupted = False
        self._schedule_task: asyncio.Task[None] | None = None
        self._shutdown_task: asyncio.Task[None] | None = None
        self._installed_signals: list[signal.Signals] = []

        self._active = 0
        self._peak_active = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def peak_active(self) -> int:
        """Highest number of toolchain tasks that were running at once."""
        return self._peak_active

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def execute(self, matrix: Matrix, report: MatrixReport | None = None) -> MatrixReport:
        """Run the whole matrix and return the (possibly partial) report.

        Returns normally after an interrupt too, once cleanup is complete;
        ``report.interrupted`` tells the two cases apart.
        """
        report = report if report is not None else MatrixReport()
        self.registry.start()
        self._install_signal_handlers()
        self._schedule_task = asyncio.create_task(
            self._schedule(matrix, report), name="matrix-scheduler"
        )
        try:
            try:
                await self._schedule_task
            except asyncio.CancelledError:
                if not self._interrupted:
                    raise

            if self._shutdown_task is not None:
                await self._shutdown_task
        finally:
            if self._shutdown_task is None and not self._settings.keep_workspaces:
                await self._purge()
            self._remove_signal_handlers()
            await self.registry.close()

        report.interrupted = self._interrupted
        return report

    def interrupt(self) -> None:
        """Begin the shutdown sequence.  Idempotent; used as signal handler."""
        if self._interrupted:
            return
        logger.warning("Interrupt received, stopping matrix run")
        self._interrupted = True
        self._cancel.set()
        self._shutdown_task = asyncio.get_running_loop().create_task(
            self._shutdown(), name="matrix-shutdown"
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def _schedule(self, matrix: Matrix, report: MatrixReport) -> None:
        slots = asyncio.Semaphore(self._config.par)
        tasks: list[asyncio.Task[None]] = []

        try:
            for toolchain, feature_sets in matrix.items():
                await slots.acquire()
                if self._cancel.is_set():
                    slots.release()
                    logger.info("Cancelled; not starting remaining toolchains")
                    break
                task = asyncio.create_task(
                    self._run_toolchain(toolchain, feature_sets, report),
                    name=f"rust-{toolchain.name}",
                )
                task.add_done_callback(lambda _task: slots.release())
                tasks.append(task)

            if tasks:
                await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            # Cancelled while waiting for a slot: take running tasks down too.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _run_toolchain(
        self,
        toolchain: ToolchainVersion,
        feature_sets: Sequence[FeatureSet],
        report: MatrixReport,
    ) -> None:
        self._active += 1
        self._peak_active = max(self._peak_active, self._active)
        workspace: Workspace | None = None
        try:
            logger.info("Preparing environment for rust %s tests", toolchain.name)
            workspace = await self.workspaces.materialize(self._config.repo, toolchain.name)
            logger.info("Running rust %s tests in %s", toolchain.name, workspace.workdir)

            await self.pinner.pin(workspace, toolchain)

            for feature_set in feature_sets:
                if self._cancel.is_set():
                    break
                report.runs.append(await self.executor.run(workspace, toolchain, feature_set))
        except (MatrixError, OSError) as exc:
            logger.error("Rust %s tests aborted: %s", toolchain.name, exc)
            report.failures.append(ToolchainFailure(toolchain=toolchain.name, error=str(exc)))
        except Exception as exc:
            # Recorded against this toolchain only; siblings keep running.
            logger.exception("Rust %s tests crashed", toolchain.name)
            report.failures.append(
                ToolchainFailure(toolchain=toolchain.name, error=f"{type(exc).__name__}: {exc}")
            )
        finally:
            self._active -= 1
            # After an interrupt the shutdown path owns deletion.
            if workspace is not None and not self._interrupted:
                await self.workspaces.release(workspace)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def _shutdown(self) -> None:
        await asyncio.sleep(self._settings.shutdown_grace_seconds)

        task = self._schedule_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})

        await self._purge()
        logger.info("Shutting down ...")

    async def _purge(self) -> None:
        # A copy thread can outlive its cancelled task; let it finish first.
        await self.workspaces.wait_for_copies()
        for path in await self.registry.purge():
            logger.debug("Deleted %s", path)

    def _install_signal_handlers(self) -> None:
        if not self._handle_signals:
            return
        loop = asyncio.get_running_loop()
        for sig in _SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.interrupt)
            except (NotImplementedError, RuntimeError):
                logger.debug("Cannot install handler for %s on this platform", sig.name)
                continue
            self._installed_signals.append(sig)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()
