"""Run executor — one ``cargo test`` invocation per feature combination."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cratematrix.config import RunnerSettings
from cratematrix.core import cargo
from cratematrix.core.commands import CommandRunner
from cratematrix.core.workspace import Workspace
from cratematrix.models.config import Feature
from cratematrix.models.results import RunResult
from cratematrix.models.versioning import ToolchainVersion
from cratematrix.report.renderer import ReportRenderer

logger = logging.getLogger(__name__)


class RunExecutor:
    """Runs the test command for a single feature combination.

    Default features are disabled so only the combination's features are
    enabled.  Output is captured in full and dumped only on failure.
    Combinations of one toolchain share a workspace and must be run one
    after another.
    """

    def __init__(
        self,
        runner: CommandRunner,
        settings: RunnerSettings,
        renderer: ReportRenderer | None = None,
    ) -> None:
        self._runner = runner
        self._settings = settings
        self._renderer = renderer or ReportRenderer()

    async def run(
        self,
        workspace: Workspace,
        toolchain: ToolchainVersion,
        features: Sequence[Feature],
    ) -> RunResult:
        names = tuple(feature.name for feature in features)
        output = await self._runner.run(
            cargo.cargo_test_args(self._settings, toolchain.name, names),
            cwd=workspace.workdir,
        )
        result = RunResult(
            toolchain=toolchain.name,
            features=names,
            passed=output.succeeded,
            stdout=output.stdout if not output.succeeded else "",
            stderr=output.stderr if not output.succeeded else "",
        )

        if result.passed:
            logger.info(
                "Test rust=%s, features=[%s] succeeded!", toolchain.name, result.feature_list
            )
        else:
            logger.error(
                "Test rust=%s, features=[%s] failed!", toolchain.name, result.feature_list
            )
            self._renderer.print_output(
                f"rust={toolchain.name} features=[{result.feature_list}]",
                result.stdout,
                result.stderr,
            )
        return result
