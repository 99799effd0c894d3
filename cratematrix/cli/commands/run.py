"""``cratematrix run CFG`` — run the full matrix and the fuzz campaign.

Exit status is 0 whenever the run itself completes, even if individual
combinations or fuzz targets fail, and also after an interrupt once
cleanup is done.  Setup failures (config, toolchain install, unparsable
versions) exit with status 1.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from cratematrix.cli.commands._common import console, prepare
from cratematrix.core.commands import SubprocessRunner
from cratematrix.core.errors import ToolchainInstallError, VersionParseError
from cratematrix.core.session import run_session
from cratematrix.report.renderer import ReportRenderer


def run_cmd(
    cfg: Path = typer.Argument(..., help="Path to the matrix config (JSON or TOML)."),
    install: bool = typer.Option(
        False, "--install", help="Install every declared toolchain with rustup first."
    ),
    par: int = typer.Option(
        None, "--par", min=1, help="Override the configured concurrency limit."
    ),
    fuzz: bool = typer.Option(True, "--fuzz/--no-fuzz", help="Run the fuzz campaign afterwards."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Test every toolchain x feature-combination pair, then fuzz."""
    settings, config = prepare(cfg, verbose)
    if par is not None:
        config = config.model_copy(update={"par": par})

    renderer = ReportRenderer(console=console)
    runner = SubprocessRunner(kill_on_cancel=settings.terminate_children_on_shutdown)
    try:
        report = asyncio.run(
            run_session(config, settings, runner, install=install, fuzz=fuzz, renderer=renderer)
        )
    except (ToolchainInstallError, VersionParseError, OSError) as exc:
        console.print(f"[bold red]Fatal:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("[bold yellow]Interrupted.[/bold yellow]")
        raise typer.Exit(code=0)

    console.print()
    renderer.print_summary(report)
