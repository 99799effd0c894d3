"""Tests for RunExecutor — one test invocation per feature combination."""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console

from cratematrix.core.executor import RunExecutor
from cratematrix.core.workspace import Workspace
from cratematrix.models.config import Feature
from cratematrix.models.versioning import ToolchainVersion
from cratematrix.report.renderer import ReportRenderer

STABLE = ToolchainVersion(name="stable")


def _workspace(tmp_path: Path) -> Workspace:
    return Workspace(toolchain="stable", root=tmp_path, workdir=tmp_path / "mycrate")


def _renderer() -> ReportRenderer:
    return ReportRenderer(console=Console(record=True, width=120))


class TestRunExecutor:
    def test_invocation_disables_default_features(self, runner, settings, tmp_path):
        workspace = _workspace(tmp_path)
        executor = RunExecutor(runner, settings, _renderer())
        asyncio.run(executor.run(workspace, STABLE, [Feature(name="A"), Feature(name="B")]))

        args, cwd, _ = runner.calls[0]
        assert args == ("cargo", "+stable", "test", "--no-default-features", "--features", "A,B")
        assert cwd == workspace.workdir

    def test_empty_combination_passes_empty_feature_list(self, runner, settings, tmp_path):
        executor = RunExecutor(runner, settings, _renderer())
        asyncio.run(executor.run(_workspace(tmp_path), STABLE, []))
        assert runner.calls[0][0][-1] == ""

    def test_success_has_no_output(self, runner, settings, tmp_path):
        renderer = _renderer()
        result = asyncio.run(
            RunExecutor(runner, settings, renderer).run(_workspace(tmp_path), STABLE, [])
        )
        assert result.passed
        assert result.stdout == result.stderr == ""
        assert renderer.console.export_text() == ""

    def test_failure_surfaces_both_streams(self, make_runner, settings, tmp_path):
        runner = make_runner(fail=lambda args: True)
        renderer = _renderer()
        result = asyncio.run(
            RunExecutor(runner, settings, renderer).run(
                _workspace(tmp_path), STABLE, [Feature(name="A")]
            )
        )
        assert not result.passed
        assert result.features == ("A",)
        assert result.stdout == "captured out"
        assert result.stderr == "captured err"
        dumped = renderer.console.export_text()
        assert "captured out" in dumped
        assert "captured err" in dumped
