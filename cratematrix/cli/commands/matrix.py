"""``cratematrix matrix CFG`` — preview the generated test matrix."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from cratematrix.cli.commands._common import console, prepare
from cratematrix.core.commands import SubprocessRunner
from cratematrix.core.errors import VersionParseError
from cratematrix.core.session import plan_matrix
from cratematrix.report.renderer import ReportRenderer


def matrix_cmd(
    cfg: Path = typer.Argument(..., help="Path to the matrix config (JSON or TOML)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Resolve the stable toolchain and print every planned combination."""
    settings, config = prepare(cfg, verbose)
    try:
        matrix = asyncio.run(plan_matrix(config, settings, SubprocessRunner()))
    except (VersionParseError, OSError) as exc:
        console.print(f"[bold red]Cannot build matrix:[/bold red] {exc}")
        raise typer.Exit(code=1)

    ReportRenderer(console=console).print_matrix(matrix)
