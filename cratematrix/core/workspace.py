"""Isolated workspaces — one private copy of the project per toolchain."""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from cratematrix.config import RunnerSettings
from cratematrix.core.cleanup import CleanupRegistry
from cratematrix.core.errors import WorkspaceError

logger = logging.getLogger(__name__)


class Workspace(BaseModel):
    """A disposable project copy owned by exactly one toolchain task.

    ``root`` is the temporary directory registered for deletion;
    ``workdir`` is the project copy inside it where commands run.
    """

    model_config = ConfigDict(frozen=True)

    toolchain: str
    root: Path
    workdir: Path


class WorkspaceManager:
    """Creates workspaces and hands their paths to the cleanup registry.

    Parameters
    ----------
    registry:
        Registry that receives every workspace root before it is filled.
    settings:
        Runner settings (lock file name, whether to keep workspaces).
    """

    def __init__(self, registry: CleanupRegistry, settings: RunnerSettings) -> None:
        self._registry = registry
        self._settings = settings
        self._copies: set[asyncio.Future[None]] = set()

    async def materialize(self, project_path: Path, toolchain_name: str) -> Workspace:
        """Copy ``project_path`` into a fresh temporary directory.

        The directory is registered for deletion before the copy starts, so
        an interruption mid-copy still cleans it up.  The copy itself runs
        in a worker thread and does not block other tasks.  Cancelling the
        caller does not stop that thread; ``wait_for_copies`` waits for it.

        Raises
        ------
        WorkspaceError
            If the source is missing or the copy fails.
        """
        project_name = project_path.resolve().name
        root = Path(tempfile.mkdtemp(prefix=f"{project_name}-{toolchain_name}-"))
        await self._registry.register(root)

        workdir = root / project_name
        try:
            await asyncio.shield(self._start_copy(project_path, workdir))
        except OSError as exc:
            raise WorkspaceError(
                f"Could not copy {project_path} into workspace {root}: {exc}"
            ) from exc

        logger.debug("Workspace for %s ready at %s", toolchain_name, workdir)
        return Workspace(toolchain=toolchain_name, root=root, workdir=workdir)

    async def wait_for_copies(self) -> None:
        """Block until no copy thread is still writing into a workspace."""
        if self._copies:
            await asyncio.wait(set(self._copies))

    async def release(self, workspace: Workspace) -> None:
        """Remove a workspace whose task has finished."""
        if self._settings.keep_workspaces:
            logger.info("Keeping workspace %s", workspace.root)
            return
        await asyncio.to_thread(shutil.rmtree, workspace.root, ignore_errors=True)

    def _start_copy(self, source: Path, destination: Path) -> asyncio.Future[None]:
        copy = asyncio.ensure_future(asyncio.to_thread(self._copy, source, destination))
        self._copies.add(copy)
        copy.add_done_callback(self._copy_finished)
        return copy

    def _copy_finished(self, copy: asyncio.Future[None]) -> None:
        self._copies.discard(copy)
        if not copy.cancelled() and copy.exception() is not None:
            logger.debug("Workspace copy failed: %s", copy.exception())

    def _copy(self, source: Path, destination: Path) -> None:
        if not source.is_dir():
            raise FileNotFoundError(f"project directory {source} does not exist")
        shutil.copytree(source, destination, symlinks=True)
        # A lock file from a newer toolchain can break older ones.
        (destination / self._settings.lockfile_name).unlink(missing_ok=True)
