"""Matrix configuration models and the file loader that produces them."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cratematrix.core.errors import ConfigError
from cratematrix.models.versioning import ToolchainVersion


class Feature(BaseModel):
    """An optional cargo feature, possibly gated on a minimum toolchain."""

    model_config = ConfigDict(frozen=True)

    name: str
    min_rust: str | None = None


class FuzzConfig(BaseModel):
    """Settings for the fuzz campaign that follows the matrix."""

    model_config = ConfigDict(frozen=True)

    rel_path: Path
    rust: str
    duration_s: int = Field(gt=0)


class MatrixConfig(BaseModel):
    """Project-level configuration for a matrix run.

    Loaded once from a JSON or TOML file and shared read-only by every
    toolchain task.
    """

    model_config = ConfigDict(frozen=True)

    repo: Path
    features: tuple[Feature, ...] = ()
    rust: tuple[ToolchainVersion, ...]
    par: int = Field(default=1, ge=1)
    fuzzing: FuzzConfig | None = None

    @property
    def project_name(self) -> str:
        """Directory name of the project, reused inside every workspace."""
        return self.repo.resolve().name


def load_config(path: Path) -> MatrixConfig:
    """Read and validate a matrix configuration file.

    ``.toml`` files are parsed with :mod:`tomllib`; everything else is
    treated as JSON.

    Raises
    ------
    ConfigError
        If the file cannot be read, parsed, or validated.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"Can't read config file {path}: {exc}") from exc

    try:
        data: Any
        if path.suffix == ".toml":
            data = tomllib.loads(raw.decode("utf-8"))
        else:
            data = json.loads(raw)
        return MatrixConfig.model_validate(data)
    except (ValueError, ValidationError) as exc:
        raise ConfigError(f"Could not parse config file {path}: {exc}") from exc
