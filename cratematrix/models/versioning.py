"""Toolchain and dependency-pin models — the keys of the test matrix."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from semver import Version


class VersionPin(BaseModel):
    """Forces one transitive dependency to an exact version.

    Old toolchains often cannot build the newest release of a dependency,
    so the lock file of their workspace is rewritten to this version before
    any test runs.
    """

    model_config = ConfigDict(frozen=True)

    dependency: str
    version: str

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        try:
            Version.parse(value)
        except ValueError as exc:
            raise ValueError(f"invalid pin version {value!r}") from exc
        return value


class ToolchainVersion(BaseModel):
    """A toolchain selector plus the pins it needs.

    ``name`` is a concrete version (``"1.40.0"``) or one of the symbolic
    channels ``"stable"`` / ``"nightly"``.  Instances are frozen and
    hashable because they key the generated matrix.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    requires_pinning: tuple[VersionPin, ...] = ()
