"""Shared test fixtures for cratematrix."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from cratematrix.config import RunnerSettings
from cratematrix.models.config import MatrixConfig
from cratematrix.models.results import CommandOutput


class ScriptedRunner:
    """Fake ``CommandRunner`` standing in for cargo and rustup.

    Every call is recorded.  ``cargo +stable --version`` reports
    ``stable``; any command for which ``fail(args)`` is true exits 1 with
    canned output.  ``cargo test`` calls can be slowed down (``delay``) or
    held until ``release_tests`` is called (``block_tests``).
    """

    def __init__(
        self,
        *,
        stable: str = "1.60.0",
        fail: Callable[[Sequence[str]], bool] | None = None,
        delay: float = 0.0,
        block_tests: bool = False,
    ) -> None:
        self.stable = stable
        self.fail = fail or (lambda args: False)
        self.delay = delay
        self.calls: list[tuple[tuple[str, ...], Path | None, dict[str, str]]] = []
        self.on_call: Callable[[Sequence[str], Path | None], None] | None = None
        self.tests_started = 0
        self.active_tests = 0
        self.peak_tests = 0
        self._gate = asyncio.Event()
        if not block_tests:
            self._gate.set()

    def release_tests(self) -> None:
        self._gate.set()

    async def wait_for_tests(self, count: int) -> None:
        while self.tests_started < count:
            await asyncio.sleep(0.005)

    def commands(self, verb: str) -> list[tuple[str, ...]]:
        """Recorded argv lists whose cargo subcommand is ``verb``."""
        return [args for args, _, _ in self.calls if len(args) > 2 and args[2] == verb]

    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandOutput:
        self.calls.append((tuple(args), cwd, dict(env or {})))
        if self.on_call is not None:
            self.on_call(args, cwd)

        if "--version" in args:
            return CommandOutput(
                args=tuple(args),
                returncode=0,
                stdout=f"cargo {self.stable} (d1fd9fe2c 2022-03-01)\n",
            )

        if "test" in args:
            self.tests_started += 1
            self.active_tests += 1
            self.peak_tests = max(self.peak_tests, self.active_tests)
            try:
                if self.delay:
                    await asyncio.sleep(self.delay)
                await self._gate.wait()
            finally:
                self.active_tests -= 1

        if self.fail(args):
            return CommandOutput(
                args=tuple(args), returncode=1, stdout="captured out", stderr="captured err"
            )
        return CommandOutput(args=tuple(args), returncode=0, stdout="ok", stderr="")


@pytest.fixture
def settings() -> RunnerSettings:
    """Runner settings with short timings and no .env lookup."""
    return RunnerSettings(
        _env_file=None,
        shutdown_grace_seconds=0.05,
        settle_seconds=0,
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A tiny crate directory with a stale lock file."""
    root = tmp_path / "mycrate"
    (root / "src").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "mycrate"\nversion = "0.1.0"\n')
    (root / "Cargo.lock").write_text("# generated by a newer cargo\n")
    (root / "src" / "lib.rs").write_text("pub fn answer() -> u32 { 42 }\n")
    return root


@pytest.fixture
def make_config(project: Path) -> Callable[..., MatrixConfig]:
    """Factory fixture: the two-feature, two-toolchain example config."""

    def _factory(**overrides: Any) -> MatrixConfig:
        data: dict[str, Any] = {
            "repo": str(project),
            "features": [{"name": "A"}, {"name": "B", "min_rust": "1.50.0"}],
            "rust": [{"name": "1.40.0"}, {"name": "stable"}],
            "par": 2,
        }
        data.update(overrides)
        return MatrixConfig.model_validate(data)

    return _factory


@pytest.fixture
def write_config(tmp_path: Path, make_config: Callable[..., MatrixConfig]) -> Callable[..., Path]:
    """Factory fixture: write a config as JSON and return its path."""

    def _factory(**overrides: Any) -> Path:
        config = make_config(**overrides)
        path = tmp_path / "matrix.json"
        path.write_text(json.dumps(config.model_dump(mode="json")))
        return path

    return _factory


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def make_runner() -> Callable[..., ScriptedRunner]:
    """Factory fixture: a ``ScriptedRunner`` with custom behavior."""
    return ScriptedRunner
