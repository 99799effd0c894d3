"""Matrix execution engine: versions, matrix, workspaces, runs, shutdown."""
