"""
project-hub CLI - Board commands.

Render the project board once (show), browse it interactively (browse),
or check a snapshot file without rendering it (validate).
"""

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from projecthub.cli.errors import (
    ExitCode,
    print_error,
    print_invalid_snapshot_error,
)
from projecthub.core.board import (
    ApplyFilter,
    ProjectSnapshot,
    SelectAtIndex,
    SnapshotLoadError,
    SortField,
    SortTable,
    ViewKind,
    ViewState,
    load_snapshot,
    sample_snapshot,
)
from projecthub.core.config import HubConfig, load_config
from projecthub.tui import BoardBrowser, BoardRenderer, Keymap

logger = logging.getLogger(__name__)


def _load_config() -> HubConfig:
    """Load the effective config, exiting with USER_ERROR if it is invalid."""
    try:
        return load_config()
    except ValidationError as e:
        print_error(
            "Invalid configuration",
            reason=str(e),
            solution="project-hub config --paths  # to find the offending file",
        )
        raise typer.Exit(ExitCode.USER_ERROR)


def _make_console(config: HubConfig) -> Console:
    return Console(no_color=not config.display.color, highlight=False)


def _resolve_data_path(data: Path | None, config: HubConfig) -> Path | None:
    """Pick the snapshot file: --data first, then the configured data_path."""
    if data is not None:
        return data
    if config.data_path:
        return Path(config.data_path)
    return None


def _load_project(data: Path | None, config: HubConfig) -> ProjectSnapshot:
    """
    Load the snapshot to display, falling back to the built-in sample.

    Raises:
        typer.Exit: With USER_ERROR if the file is unreadable or invalid
    """
    path = _resolve_data_path(data, config)
    if path is None:
        logger.debug("No data file configured, using the built-in sample project")
        return sample_snapshot()

    try:
        return load_snapshot(path)
    except SnapshotLoadError as e:
        print_error(
            "Could not load project data",
            reason=str(e),
            solution="project-hub show --data path/to/board.yaml",
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    except ValidationError as e:
        print_invalid_snapshot_error(path, e)
        raise typer.Exit(ExitCode.USER_ERROR)


def _stdin_is_tty() -> bool:
    return sys.stdin.isatty()


def _parse_select(value: str) -> tuple[int, int]:
    """Parse a 'GROUP,OFFSET' position."""
    group_str, sep, offset_str = value.partition(",")
    try:
        if not sep:
            raise ValueError(value)
        return int(group_str.strip()), int(offset_str.strip())
    except ValueError:
        print_error(
            f"Invalid --select value: {value}",
            reason="Expected two zero-based indexes: GROUP,OFFSET",
            solution="project-hub show --select 1,0",
        )
        raise typer.Exit(ExitCode.USER_ERROR) from None


def show(
    data: Path | None = typer.Option(
        None,
        "--data",
        "-d",
        help="Snapshot file (.yaml, .yml or .json). Defaults to config data_path or the sample",
    ),
    view: ViewKind | None = typer.Option(
        None,
        "--view",
        "-v",
        help="View to render (defaults to config default_view)",
    ),
    query: str | None = typer.Option(
        None,
        "--filter",
        "-f",
        help='Filter query, e.g. "label:bug assignee:@sato"',
    ),
    sort: SortField | None = typer.Option(
        None,
        "--sort",
        "-s",
        help="Sort the table by a field",
    ),
    descending: bool = typer.Option(
        False,
        "--desc",
        help="Sort descending (with --sort)",
    ),
    select: str | None = typer.Option(
        None,
        "--select",
        help="Select GROUP,OFFSET before rendering (Table uses group 0)",
    ),
) -> None:
    """
    Render one frame of the project board and exit.

    Examples:
        project-hub show
        project-hub show --view table --sort priority --desc
        project-hub show --view roadmap --filter "sprint:'Sprint 1'"
        project-hub show --data board.yaml --select 1,0
    """
    config = _load_config()
    snapshot = _load_project(data, config)

    state = ViewState(snapshot, initial_view=view or config.default_view)
    if query:
        state.dispatch(ApplyFilter(query))
    if sort is not None:
        state.dispatch(SortTable(sort))
        if descending:
            state.dispatch(SortTable(sort))
    if select is not None:
        group, offset = _parse_select(select)
        if state.projection.item_at(group, offset) is None:
            logger.warning(f"No item at {group},{offset} in {state.active_view.value} view")
        state.dispatch(SelectAtIndex(group, offset))

    console = _make_console(config)
    renderer = BoardRenderer(
        console=console,
        display=config.display,
        keymap=Keymap.from_config(config.keymap),
    )
    console.print(renderer.render(state.frame, project_name=snapshot.name))


def browse(
    ctx: typer.Context,
    data: Path | None = typer.Option(
        None,
        "--data",
        "-d",
        help="Snapshot file (.yaml, .yml or .json). Defaults to config data_path or the sample",
    ),
    view: ViewKind | None = typer.Option(
        None,
        "--view",
        "-v",
        help="View active at startup (defaults to config default_view)",
    ),
) -> None:
    """
    Browse the project board interactively.

    Keys: 1/2/3 switch view, h/j/k/l or arrows move, / filter,
    s then a column key sorts the table, o shows the focused item,
    q quits.
    """
    if not _stdin_is_tty():
        print_error(
            "browse needs an interactive terminal",
            reason="stdin is not a TTY",
            solution="project-hub show  # render a single frame instead",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    config = _load_config()
    snapshot = _load_project(data, config)
    keymap = Keymap.from_config(config.keymap)
    browser = BoardBrowser(
        ViewState(snapshot, initial_view=view or config.default_view),
        project_name=snapshot.name,
        keymap=keymap,
        renderer=BoardRenderer(
            console=_make_console(config), display=config.display, keymap=keymap
        ),
    )

    try:
        browser.run()
    except KeyboardInterrupt:
        raise typer.Exit(ExitCode.SIGINT)
    except Exception as e:
        print_error(
            "Board browser stopped unexpectedly",
            reason=str(e),
            solution="project-hub --debug browse  # for the full traceback",
        )
        if ctx.obj and ctx.obj.get("debug"):
            logger.exception("browse failed")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def validate(
    path: Path = typer.Argument(..., help="Snapshot file to check"),
) -> None:
    """
    Validate a snapshot file without rendering it.

    Exits with code 2 if the file cannot be loaded or breaks a rule
    (duplicate ids, progress outside 0-100, unknown status or priority,
    items whose status has no column).
    """
    try:
        snapshot = load_snapshot(path)
    except SnapshotLoadError as e:
        print_error("Could not load project data", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    except ValidationError as e:
        print_invalid_snapshot_error(path, e)
        raise typer.Exit(ExitCode.USER_ERROR)

    console = Console(highlight=False)
    console.print(f"[green]✓[/green] {escape(str(path))} is valid")
    console.print(
        f"  Project: {escape(snapshot.name)}  "
        f"Items: {len(snapshot.items)}  Columns: {len(snapshot.columns)}"
    )
