"""
project-hub CLI - Config command.

Shows the effective configuration after merging defaults, the user config,
the project config, and environment variables.
"""

import typer
from pydantic import ValidationError
from rich.console import Console

from projecthub.cli.errors import ExitCode, print_error
from projecthub.core.config import get_project_config_path, get_user_config_path, load_config

console = Console(highlight=False)


def config(
    paths: bool = typer.Option(
        False,
        "--paths",
        help="Show the config file locations instead of the merged values",
    ),
) -> None:
    """
    Print the effective configuration as JSON.

    Examples:
        project-hub config
        PROJECT_HUB_DEFAULT_VIEW=table project-hub config
        project-hub config --paths
    """
    if paths:
        for label, path in (
            ("user", get_user_config_path()),
            ("project", get_project_config_path()),
        ):
            state = "found" if path.exists() else "missing"
            console.print(f"{label}: {path} ({state})", soft_wrap=True)
        return

    try:
        effective = load_config()
    except ValidationError as e:
        print_error(
            "Invalid configuration",
            reason=str(e),
            solution="Check .project-hub.json and ~/.config/project-hub/config.json",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    console.print(effective.model_dump_json(indent=2), soft_wrap=True, markup=False, emoji=False)
