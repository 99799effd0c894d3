"""Dependency pinning — forces exact transitive versions for old toolchains.

A fresh resolution may pick dependency releases that an old toolchain
cannot build.  Toolchains that declare pins get their lock file
regenerated under that toolchain and then rewritten with
``cargo update -p <dep> --precise <version>`` for every pin.
"""

from __future__ import annotations

import logging

from cratematrix.config import RunnerSettings
from cratematrix.core import cargo
from cratematrix.core.commands import CommandRunner
from cratematrix.core.errors import PinningError
from cratematrix.core.workspace import Workspace
from cratematrix.models.results import CommandOutput
from cratematrix.models.versioning import ToolchainVersion

logger = logging.getLogger(__name__)


class DependencyPinner:
    """Applies a toolchain's version pins inside its workspace.

    Every step must succeed; the first failure raises ``PinningError`` and
    the toolchain task is abandoned, since tests against an unpinned
    dependency set would be meaningless.
    """

    def __init__(self, runner: CommandRunner, settings: RunnerSettings) -> None:
        self._runner = runner
        self._settings = settings

    async def pin(self, workspace: Workspace, toolchain: ToolchainVersion) -> None:
        if not toolchain.requires_pinning:
            return

        logger.debug("Generating lock file with rust=%s", toolchain.name)
        output = await self._runner.run(
            cargo.generate_lockfile_args(self._settings, toolchain.name),
            cwd=workspace.workdir,
        )
        self._check(output, f"generate lock file for rust={toolchain.name}")

        for pin in toolchain.requires_pinning:
            logger.debug("Pinning %s to %s", pin.dependency, pin.version)
            output = await self._runner.run(
                cargo.update_precise_args(
                    self._settings, toolchain.name, pin.dependency, pin.version
                ),
                cwd=workspace.workdir,
            )
            self._check(
                output,
                f"pin {pin.dependency} to {pin.version} for rust={toolchain.name}",
            )

    @staticmethod
    def _check(output: CommandOutput, action: str) -> None:
        if not output.succeeded:
            raise PinningError(
                f"Failed to {action} (exit status {output.returncode}): "
                f"{output.stderr.strip()}"
            )
