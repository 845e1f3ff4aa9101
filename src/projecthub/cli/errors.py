"""
Standardized error handling and exit codes for the project-hub CLI.

Provides consistent error messages with actionable guidance and standard
exit codes across all commands.
"""

from enum import IntEnum
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for project-hub CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic or unexpected error."""

    USER_ERROR = 2
    """Invalid input, configuration, or data file (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Snapshot file not found",
        ...     reason="board.yaml does not exist",
        ...     solution="project-hub validate path/to/board.yaml",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}")


def format_validation_error(error: ValidationError) -> str:
    """Format each Pydantic error on its own line as 'location: message'."""
    lines = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "(snapshot)"
        lines.append(f"{location}: {err['msg']}")
    return "\n".join(lines)


def print_invalid_snapshot_error(path: Path | None, error: ValidationError) -> None:
    """Print error when snapshot data violates the model."""
    source = str(path) if path else "snapshot"
    print_error(
        f"Invalid project data in {source}",
        reason=format_validation_error(error),
        solution=f"project-hub validate {source}  # after fixing the entries above",
    )

