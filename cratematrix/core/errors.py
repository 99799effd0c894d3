"""Error taxonomy for matrix runs.

Process-fatal: ``ConfigError``, ``VersionParseError``, ``ToolchainInstallError``.
Fatal to a single toolchain task: ``WorkspaceError``, ``PinningError``.
Test and fuzz failures are reported as results, never raised.
"""

from __future__ import annotations


class MatrixError(RuntimeError):
    """Base class for every error raised by the matrix engine."""


class ConfigError(MatrixError):
    """The configuration file is unreadable or invalid."""


class VersionParseError(MatrixError):
    """A toolchain or feature version identifier could not be parsed."""


class ToolchainInstallError(MatrixError):
    """Installing a declared toolchain failed."""


class WorkspaceError(MatrixError):
    """Materializing an isolated workspace failed."""


class PinningError(MatrixError):
    """Regenerating the lock file or pinning a dependency failed."""
