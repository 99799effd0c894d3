"""Toolchain installation via rustup."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cratematrix.config import RunnerSettings
from cratematrix.core import cargo
from cratematrix.core.commands import CommandRunner
from cratematrix.core.errors import ToolchainInstallError
from cratematrix.models.versioning import ToolchainVersion

logger = logging.getLogger(__name__)


async def install_toolchains(
    runner: CommandRunner,
    settings: RunnerSettings,
    toolchains: Iterable[ToolchainVersion],
) -> None:
    """Install each toolchain in turn; the first failure is fatal."""
    for toolchain in toolchains:
        logger.info("Installing rust toolchain '%s'", toolchain.name)
        output = await runner.run(cargo.install_args(settings, toolchain.name))
        if not output.succeeded:
            logger.error(
                "Rustup failed to install toolchain '%s' with exit status %d",
                toolchain.name,
                output.returncode,
            )
            raise ToolchainInstallError(
                f"rustup failed to install toolchain '{toolchain.name}' "
                f"(exit status {output.returncode})"
            )
