"""cratematrix data models — Pydantic v2, frozen where they are shared."""

from cratematrix.models.config import Feature, FuzzConfig, MatrixConfig, load_config
from cratematrix.models.results import (
    CommandOutput,
    FuzzResult,
    MatrixReport,
    RunResult,
    ToolchainFailure,
)
from cratematrix.models.versioning import ToolchainVersion, VersionPin

__all__ = [
    # config
    "Feature",
    "FuzzConfig",
    "MatrixConfig",
    "load_config",
    # versioning
    "ToolchainVersion",
    "VersionPin",
    # results
    "CommandOutput",
    "RunResult",
    "FuzzResult",
    "ToolchainFailure",
    "MatrixReport",
]
