"""A full matrix session: install, resolve, generate, run, then fuzz."""

from __future__ import annotations

import asyncio
import logging

from cratematrix.config import RunnerSettings
from cratematrix.core.commands import CommandRunner
from cratematrix.core.coordinator import MatrixCoordinator
from cratematrix.core.fuzz import FuzzCampaignRunner
from cratematrix.core.matrix import Matrix, generate_matrix
from cratematrix.core.toolchains import install_toolchains
from cratematrix.core.versions import resolve_stable
from cratematrix.models.config import MatrixConfig
from cratematrix.models.results import MatrixReport
from cratematrix.report.renderer import ReportRenderer

logger = logging.getLogger(__name__)


async def plan_matrix(
    config: MatrixConfig, settings: RunnerSettings, runner: CommandRunner
) -> Matrix:
    """Resolve ``stable`` and build the matrix; nothing is executed."""
    stable = await resolve_stable(runner, settings)
    return generate_matrix(config, stable)


async def run_session(
    config: MatrixConfig,
    settings: RunnerSettings,
    runner: CommandRunner,
    *,
    install: bool = False,
    fuzz: bool = True,
    renderer: ReportRenderer | None = None,
    handle_signals: bool = True,
) -> MatrixReport:
    """Drive one complete run and return its report.

    Setup failures (``ToolchainInstallError``, ``VersionParseError``) are
    raised before any workspace exists.  Test and fuzz failures end up in
    the report.  An interrupt skips the fuzz phase.
    """
    renderer = renderer or ReportRenderer()

    if install:
        await install_toolchains(runner, settings, config.rust)

    matrix = await plan_matrix(config, settings, runner)
    logger.info(
        "Generated matrix: %d toolchain(s), %d combination(s)",
        len(matrix),
        sum(len(feature_sets) for feature_sets in matrix.values()),
    )

    coordinator = MatrixCoordinator(
        config, settings, runner, renderer=renderer, handle_signals=handle_signals
    )
    report = await coordinator.execute(matrix)
    if report.interrupted:
        return report

    if fuzz and config.fuzzing is not None:
        await asyncio.sleep(settings.settle_seconds)
        fuzzer = FuzzCampaignRunner(runner, settings, renderer)
        report.fuzz.extend(await fuzzer.fuzz(config.repo, config.fuzzing))

    return report
