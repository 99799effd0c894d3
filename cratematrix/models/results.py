"""Result models — command output, per-combination results, run report."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CommandOutput(BaseModel):
    """Exit status and captured streams of one external command."""

    model_config = ConfigDict(frozen=True)

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class RunResult(BaseModel):
    """Outcome of one ``(toolchain, feature combination)`` test run."""

    model_config = ConfigDict(frozen=True)

    toolchain: str
    features: tuple[str, ...]
    passed: bool
    stdout: str = ""
    stderr: str = ""

    @property
    def feature_list(self) -> str:
        """Comma-joined feature names, as passed to ``--features``."""
        return ",".join(self.features)


class FuzzResult(BaseModel):
    """Outcome of fuzzing one target."""

    model_config = ConfigDict(frozen=True)

    target: str
    passed: bool
    stdout: str = ""
    stderr: str = ""


class ToolchainFailure(BaseModel):
    """A toolchain task that aborted before finishing its combinations."""

    model_config = ConfigDict(frozen=True)

    toolchain: str
    error: str


class MatrixReport(BaseModel):
    """Everything a run produced, in completion order.

    Mutable: the coordinator appends to it while tasks finish.
    """

    runs: list[RunResult] = Field(default_factory=list)
    fuzz: list[FuzzResult] = Field(default_factory=list)
    failures: list[ToolchainFailure] = Field(default_factory=list)
    interrupted: bool = False

    @property
    def failed_runs(self) -> list[RunResult]:
        return [r for r in self.runs if not r.passed]

    @property
    def failed_fuzz(self) -> list[FuzzResult]:
        return [f for f in self.fuzz if not f.passed]

    @property
    def all_passed(self) -> bool:
        return not (self.failed_runs or self.failed_fuzz or self.failures)
