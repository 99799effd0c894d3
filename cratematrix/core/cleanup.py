"""Pending-deletion registry for workspaces.

Tasks only ever append a path; a single consumer task owns the list.  At
shutdown (or at the end of a normal run) the registry drains whatever is
still queued and removes every recorded path that still exists.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class CleanupRegistry:
    """Single-consumer queue of workspace paths awaiting deletion.

    Must be used from inside a running event loop.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Path] = asyncio.Queue()
        self._paths: list[Path] = []
        self._consumer: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._consumer is None:
            self._consumer = asyncio.create_task(self._consume(), name="cleanup-registry")

    async def close(self) -> None:
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None
        self._drain()

    async def register(self, path: Path) -> None:
        """Record ``path`` for deletion.  Producers never read or remove."""
        await self._queue.put(path)

    @property
    def paths(self) -> list[Path]:
        """Snapshot of every registered path, including ones still queued."""
        self._drain()
        return list(self._paths)

    async def purge(self) -> list[Path]:
        """Recursively delete every registered path that still exists.

        Returns the paths that were removed.
        """
        removed: list[Path] = []
        for path in self.paths:
            if not path.exists():
                continue
            logger.debug("Trying to delete %s", path)
            await asyncio.to_thread(shutil.rmtree, path, ignore_errors=True)
            removed.append(path)
        return removed

    async def _consume(self) -> None:
        while True:
            path = await self._queue.get()
            self._paths.append(path)
            self._queue.task_done()

    def _drain(self) -> None:
        while True:
            try:
                path = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._paths.append(path)
            self._queue.task_done()
