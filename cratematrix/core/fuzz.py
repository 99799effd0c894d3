"""Fuzz campaign runner — time-boxed honggfuzz runs after the matrix.

Targets are discovered from ``<repo>/<rel_path>/fuzz_targets``: one target
per file, named after the file up to its first dot.  Each target runs for
a fixed duration and stops on the first crash.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cratematrix.config import RunnerSettings
from cratematrix.core import cargo
from cratematrix.core.commands import CommandRunner
from cratematrix.models.config import FuzzConfig
from cratematrix.models.results import FuzzResult
from cratematrix.report.renderer import ReportRenderer

logger = logging.getLogger(__name__)


def discover_targets(fuzz_dir: Path, targets_dir: str = "fuzz_targets") -> list[str]:
    """Sorted, de-duplicated target names found in ``fuzz_dir/targets_dir``."""
    names = {
        entry.name.split(".", 1)[0]
        for entry in (fuzz_dir / targets_dir).iterdir()
        if entry.is_file()
    }
    return sorted(name for name in names if name)


class FuzzCampaignRunner:
    """Runs every discovered fuzz target once, one after another.

    A failing target is reported with its captured output and the campaign
    moves on to the next target.
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

    async def fuzz(self, project_path: Path, config: FuzzConfig) -> list[FuzzResult]:
        fuzz_dir = project_path / config.rel_path
        try:
            targets = discover_targets(fuzz_dir, self._settings.fuzz_targets_dir)
        except OSError as exc:
            logger.error("Cannot list fuzz targets in %s: %s", fuzz_dir, exc)
            return []
        env = cargo.hfuzz_env(self._settings, config.duration_s)

        results: list[FuzzResult] = []
        for target in targets:
            logger.info("Fuzzing %s", target)
            output = await self._runner.run(
                cargo.hfuzz_args(self._settings, config.rust, target),
                cwd=fuzz_dir,
                env=env,
            )
            if output.succeeded:
                logger.info("Successfully fuzzed %s", target)
                results.append(FuzzResult(target=target, passed=True))
            else:
                logger.error("Error while fuzzing %s", target)
                self._renderer.print_output(f"fuzz {target}", output.stdout, output.stderr)
                results.append(
                    FuzzResult(
                        target=target,
                        passed=False,
                        stdout=output.stdout,
                        stderr=output.stderr,
                    )
                )
        return results
