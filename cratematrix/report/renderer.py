"""Rich terminal renderer for matrix runs.

Renders the planned matrix, dumps the captured output of failing commands,
and prints the end-of-run summary.

Color scheme
------------
- green     : passed
- red       : failed / aborted
- yellow    : interrupted
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from cratematrix.core.matrix import Matrix
    from cratematrix.models.results import MatrixReport

_PASSED = "[green]PASSED[/green]"
_FAILED = "[bold red]FAILED[/bold red]"


class ReportRenderer:
    """Renders matrix plans and reports as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Captured output
    # ------------------------------------------------------------------

    def print_output(self, title: str, stdout: str, stderr: str) -> None:
        """Dump captured streams of a failing command, verbatim."""
        self.console.print(
            Panel(Text(stdout), title=Text(f"{title}: std out"), border_style="dim", expand=True)
        )
        self.console.print(
            Panel(Text(stderr), title=Text(f"{title}: std err"), border_style="red", expand=True)
        )

    # ------------------------------------------------------------------
    # Matrix plan
    # ------------------------------------------------------------------

    def render_matrix(self, matrix: Matrix) -> Table:
        table = Table(title="Test Matrix", show_lines=False)
        table.add_column("Toolchain", style="cyan", no_wrap=True)
        table.add_column("Pins", style="magenta")
        table.add_column("#", justify="right")
        table.add_column("Feature combinations")

        for toolchain, combinations in matrix.items():
            pins = ", ".join(f"{p.dependency}={p.version}" for p in toolchain.requires_pinning)
            combos = "  ".join(
                "[" + ",".join(f.name for f in combo) + "]" for combo in combinations
            )
            table.add_row(Text(toolchain.name), Text(pins or "-"), str(len(combinations)), Text(combos))
        return table

    def print_matrix(self, matrix: Matrix) -> None:
        self.console.print(self.render_matrix(matrix))

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def render_summary(self, report: MatrixReport) -> Table:
        table = Table(title="Matrix Summary")
        table.add_column("Toolchain", style="cyan", no_wrap=True)
        table.add_column("Features")
        table.add_column("Result", justify="center")

        for run in report.runs:
            table.add_row(
                Text(run.toolchain),
                Text(f"[{run.feature_list}]"),
                _PASSED if run.passed else _FAILED,
            )
        for failure in report.failures:
            table.add_row(
                Text(failure.toolchain),
                Text(failure.error, style="red"),
                "[bold red]ABORTED[/bold red]",
            )
        for fuzz in report.fuzz:
            table.add_row("fuzz", Text(fuzz.target), _PASSED if fuzz.passed else _FAILED)
        return table

    def print_summary(self, report: MatrixReport) -> None:
        self.console.print(self.render_summary(report))
        if report.interrupted:
            self.console.print("[bold yellow]Run interrupted; results are partial.[/bold yellow]")
        elif report.all_passed:
            self.console.print("[bold green]All combinations passed.[/bold green]")
        else:
            self.console.print(
                f"[bold red]{len(report.failed_runs)} run(s), "
                f"{len(report.failed_fuzz)} fuzz target(s) and "
                f"{len(report.failures)} toolchain(s) failed.[/bold red]"
            )
