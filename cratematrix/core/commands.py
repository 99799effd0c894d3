"""External command backends.

Defines the ``CommandRunner`` Protocol every component uses to talk to
cargo and rustup, along with the asyncio subprocess implementation.  The
engine only ever looks at the exit status and the raw captured output.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from cratematrix.models.results import CommandOutput

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for external command backends.

    Any object with an awaitable ``run(args, cwd=..., env=...)`` returning a
    ``CommandOutput`` satisfies this protocol.
    """

    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandOutput:
        """Run ``args`` to completion and capture stdout/stderr.

        Parameters
        ----------
        args:
            Program and arguments.
        cwd:
            Working directory; the current one if omitted.
        env:
            Extra environment variables layered over ``os.environ``.
        """
        ...


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class SubprocessRunner:
    """Runs commands with ``asyncio.create_subprocess_exec``.

    When the awaiting task is cancelled the child is killed as well, unless
    ``kill_on_cancel`` is false, in which case it is left running.
    """

    def __init__(self, kill_on_cancel: bool = True) -> None:
        self._kill_on_cancel = kill_on_cancel

    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandOutput:
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd or ".")
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            env={**os.environ, **env} if env else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if self._kill_on_cancel and process.returncode is None:
                logger.debug("Killing %s (pid %d)", args[0], process.pid)
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
            raise

        return CommandOutput(
            args=tuple(args),
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
