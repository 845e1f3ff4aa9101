"""
project-hub CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging

import typer
from rich.console import Console

from projecthub import __version__
from projecthub.cli import board, config_cmd
from projecthub.cli.errors import ExitCode
from projecthub.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_VIEW = "View the Board"
PANEL_SETUP = "Check Your Setup"

# Create the main Typer app
app = typer.Typer(
    name="project-hub",
    help="Terminal project board with Board, Table and Roadmap views",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    project-hub - browse a project board in the terminal.

    Items are shown in three views over the same data: a kanban Board
    grouped by status, a sortable Table, and a Roadmap grouped by sprint.

    Quick Start:
        project-hub show                      # Render the sample board
        project-hub show --data board.yaml    # Render your own snapshot
        project-hub browse                    # Interactive mode

    Configuration:
        ~/.config/project-hub/config.json     # User settings
        .project-hub.json                     # Project settings
        PROJECT_HUB_DEFAULT_VIEW, PROJECT_HUB_DATA, PROJECT_HUB_COLOR
    """
    # Load layered env files early so PROJECT_HUB_* settings are visible to config.
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    # Store debug flag in context for subcommands
    ctx.obj = {"debug": debug}


# =============================================================================
# View the Board
# =============================================================================

app.command(name="show", rich_help_panel=PANEL_VIEW)(board.show)
app.command(name="browse", rich_help_panel=PANEL_VIEW)(board.browse)


# =============================================================================
# Check Your Setup
# =============================================================================

app.command(name="validate", rich_help_panel=PANEL_SETUP)(board.validate)
app.command(name="config", rich_help_panel=PANEL_SETUP)(config_cmd.config)


@app.command(rich_help_panel=PANEL_SETUP)
def version() -> None:
    """Show project-hub version and exit."""
    console.print(f"project-hub version {__version__}")
    raise typer.Exit(ExitCode.SUCCESS)


def cli_main() -> None:
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        raise SystemExit(ExitCode.SIGINT) from None


__all__ = ["app", "cli_main"]
