"""Toolchain version comparison with symbolic channels.

Toolchain identifiers are either concrete versions (``"1.40.0"``) or the
symbolic channels ``"stable"`` and ``"nightly"``.  ``nightly`` sorts above
everything else; ``stable`` is replaced by the concrete version the
installed stable toolchain reports, fetched once per run.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict
from semver import Version

from cratematrix.core import cargo
from cratematrix.core.errors import VersionParseError

if TYPE_CHECKING:
    from cratematrix.config import RunnerSettings
    from cratematrix.core.commands import CommandRunner

logger = logging.getLogger(__name__)

STABLE = "stable"
NIGHTLY = "nightly"


class ToolchainKind(str, enum.Enum):
    CONCRETE = "concrete"
    STABLE = "stable"
    NIGHTLY = "nightly"


class ToolchainId(BaseModel):
    """Parsed toolchain identifier: a tagged ``Concrete | Stable | Nightly``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ToolchainKind
    version: Version | None = None

    @classmethod
    def parse(cls, name: str) -> ToolchainId:
        """Parse a toolchain name, raising ``VersionParseError`` if malformed."""
        if name == NIGHTLY:
            return cls(kind=ToolchainKind.NIGHTLY)
        if name == STABLE:
            return cls(kind=ToolchainKind.STABLE)
        return cls(kind=ToolchainKind.CONCRETE, version=parse_version(name))

    def resolve(self, stable: Version) -> Version | None:
        """Concrete version for comparison; ``None`` stands for nightly."""
        if self.kind is ToolchainKind.NIGHTLY:
            return None
        if self.kind is ToolchainKind.STABLE:
            return stable
        return self.version


def parse_version(text: str) -> Version:
    try:
        return Version.parse(text)
    except ValueError as exc:
        raise VersionParseError(f"Malformed version identifier {text!r}") from exc


def versions_geq(a: str, b: str, stable: Version) -> bool:
    """Return ``True`` if toolchain ``a`` is greater than or equal to ``b``.

    ``nightly`` is the highest version possible: ``geq("nightly", x)`` is
    always true and ``geq(x, "nightly")`` is true only for ``x == "nightly"``.
    """
    left = ToolchainId.parse(a).resolve(stable)
    right = ToolchainId.parse(b).resolve(stable)
    if left is None:
        return True
    if right is None:
        return False
    return left >= right


async def resolve_stable(runner: CommandRunner, settings: RunnerSettings) -> Version:
    """Ask cargo which concrete version the ``stable`` channel points at.

    The output looks like ``cargo 1.60.0 (d1fd9fe2c 2022-03-01)``; the
    second token is the version.
    """
    output = await runner.run(cargo.version_args(settings, STABLE))
    tokens = output.stdout.split()
    if not output.succeeded or len(tokens) < 2:
        raise VersionParseError(
            f"Could not determine stable toolchain version from {output.stdout!r} "
            f"(exit status {output.returncode})"
        )
    stable = parse_version(tokens[1])
    logger.info("Stable toolchain resolves to %s", stable)
    return stable
