"""cratematrix: run a crate's tests across toolchains and feature subsets.

For every declared toolchain the eligible optional features are expanded
into their power set, each combination is tested in an isolated copy of
the project with bounded concurrency, and an optional honggfuzz campaign
runs afterwards.  Workspaces are cleaned up even when the run is
interrupted.
"""

__version__ = "0.1.0"
__description__ = "Toolchain x feature-combination test matrix runner for Rust crates"

from cratematrix.cli.app import app as cli
from cratematrix.core.coordinator import MatrixCoordinator

__all__ = ["MatrixCoordinator", "cli", "__version__"]
