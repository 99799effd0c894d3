"""Rich rendering of matrix plans, captured output, and run reports."""
