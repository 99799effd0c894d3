"""Runner settings — env-driven knobs that are not part of a project config.

Centralized config using pydantic-settings.  Reads from a .env file and
CRATEMATRIX_* environment variables; the per-project matrix lives in
:mod:`cratematrix.models.config` instead.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunnerSettings(BaseSettings):
    """Runner configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CRATEMATRIX_LOG_LEVEL=DEBUG
        export CRATEMATRIX_CARGO_BIN=/opt/cargo/bin/cargo
        export CRATEMATRIX_SHUTDOWN_GRACE_SECONDS=2
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CRATEMATRIX_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # External tools
    cargo_bin: str = "cargo"
    rustup_bin: str = "rustup"
    lockfile_name: str = "Cargo.lock"

    # Fuzzing
    fuzz_targets_dir: str = "fuzz_targets"
    hfuzz_build_args: str = "--features honggfuzz_fuzz"

    # Shutdown and scheduling
    shutdown_grace_seconds: float = Field(default=0.5, ge=0)
    settle_seconds: float = Field(default=1.5, ge=0)
    terminate_children_on_shutdown: bool = True
    keep_workspaces: bool = False
