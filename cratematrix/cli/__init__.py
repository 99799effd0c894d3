"""cratematrix CLI — Typer-based command-line interface.

Provides the ``cratematrix`` command with subcommands for running the
full matrix and for previewing the generated matrix.

All output uses Rich for formatted terminal display.
"""
