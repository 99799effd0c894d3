"""Helpers shared by CLI commands: settings, logging, config loading."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from cratematrix.config import RunnerSettings
from cratematrix.core.errors import ConfigError
from cratematrix.logs import configure_logging
from cratematrix.models.config import MatrixConfig, load_config

console = Console()


def prepare(cfg: Path, verbose: bool) -> tuple[RunnerSettings, MatrixConfig]:
    """Load settings, configure logging, and load the matrix config.

    Exits with status 1 if the config cannot be loaded.
    """
    settings = RunnerSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    try:
        config = load_config(cfg)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=1)
    return settings, config
