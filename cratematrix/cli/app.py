"""Main Typer application — imports and registers all CLI commands.

Entry point: ``cratematrix`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from cratematrix import __version__
from cratematrix.cli.commands.matrix import matrix_cmd
from cratematrix.cli.commands.run import run_cmd

app = typer.Typer(
    name="cratematrix",
    help="cratematrix: test a crate across toolchains and feature combinations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="run", help="Run the full test matrix, then the fuzz campaign.")(run_cmd)
app.command(name="matrix", help="Show the generated test matrix without running it.")(matrix_cmd)


@app.command(name="version", help="Show the cratematrix version.")
def version_cmd() -> None:
    typer.echo(f"cratematrix {__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
